from typing import List, Optional

from pydantic_settings import BaseSettings as PydanticBaseSettings


class BaseSettings(PydanticBaseSettings):
    # ===============================
    # APPLICATION SETTINGS
    # ===============================
    PROJECT_NAME: str = "BookVerse API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Digital library platform: catalog, reviews and reading state"

    # ===============================
    # API SETTINGS
    # ===============================
    API_PREFIX: str = "/api"

    # ===============================
    # JWT SETTINGS
    # ===============================
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # ===============================
    # CORS SETTINGS
    # ===============================
    FRONTEND_URL: str = "http://localhost:3000"
    BACKEND_CORS_ORIGINS: List[str] = []

    # ===============================
    # PAGINATION SETTINGS
    # ===============================
    DEFAULT_PAGE_SIZE: int = 20
    REVIEW_PAGE_SIZE: int = 10
    GENRE_PAGE_SIZE: int = 10
    FEATURED_BOOKS_LIMIT: int = 10
    RECENTLY_READ_LIMIT: int = 20

    # ===============================
    # UPLOAD SETTINGS
    # ===============================
    UPLOAD_FOLDER: str = "uploads"
    UPLOAD_URL_PATH: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_IMAGE_EXTENSIONS: List[str] = ["jpeg", "jpg", "png", "gif", "webp"]
    DEFAULT_COVER_IMAGE: str = "/placeholder.svg?height=400&width=300"

    # ===============================
    # LOGGING SETTINGS
    # ===============================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # ===============================
    # DATABASE SETTINGS
    # ===============================
    DATABASE_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = False

    # ===============================
    # COMPUTED PROPERTIES
    # ===============================
    @property
    def cors_origins(self) -> List[str]:
        origins = list(self.BACKEND_CORS_ORIGINS)
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
