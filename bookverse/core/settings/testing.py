import tempfile
from pathlib import Path
from typing import Optional

from .base import BaseSettings


class TestingSettings(BaseSettings):
    """Settings used by the test suite."""

    ENVIRONMENT: str = "testing"

    PROJECT_NAME: str = "BookVerse API - Testing"

    DATABASE_URL: str = "sqlite:///:memory:"
    AUTO_CREATE_TABLES: bool = False

    SECRET_KEY: str = "testing-secret-key-not-for-real-use-at-least-32-chars"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 5

    # Keep uploaded covers out of the working tree
    UPLOAD_FOLDER: str = str(Path(tempfile.gettempdir()) / "bookverse-test-uploads")

    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None

    model_config = {
        "case_sensitive": True,
        "env_file": None,
        "extra": "ignore",
    }
