import os
from typing import Union

from .base import BaseSettings
from .development import DevelopmentSettings
from .production import ProductionSettings
from .testing import TestingSettings


def get_settings() -> Union[DevelopmentSettings, ProductionSettings, TestingSettings]:
    """
    Factory function to get the appropriate settings instance.

    Returns:
        Settings instance based on ENVIRONMENT variable:
        - development (default): local SQLite database, no .env needed
        - testing: in-memory SQLite, temp upload folder
        - production: secrets loaded from environment / .env file
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()

    if environment == "production":
        return ProductionSettings()
    if environment == "testing":
        return TestingSettings()
    return DevelopmentSettings()


# Global settings instance
settings = get_settings()

__all__ = ["settings", "get_settings", "BaseSettings"]
