"""
Configuration Utility - Environment Variables Management

Centralized configuration loading from .env files using pydantic-settings.
Type-safe access to all environment variables with validation.

Usage:
    from utils.config import settings

    db_path = settings.SQLITE_PATH
    origin = settings.CORS_ORIGIN
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    SQLITE_PATH: str = Field(default="./users.db")
    SQLITE_TIMEOUT: float = Field(default=5.0)

    # Backend API Configuration
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=5000)

    # Cross-origin policy (HTTP and WebSocket handshake)
    CORS_ORIGIN: str = Field(default="http://localhost:5173")
    CORS_METHODS: list[str] = Field(default=["GET", "POST"])
    CORS_HEADERS: list[str] = Field(default=["Content-Type"])

    # Spreadsheet Export
    EXPORT_FILENAME: str = Field(default="ai_bot_users.xlsx")
    EXPORT_SHEET_NAME: str = Field(default="Users")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")
    LOG_OUTPUT: str = Field(default="stdout")
    LOG_FILE: str = Field(default="./logs/aibot-backend.log")

    # Application Metadata
    ENVIRONMENT: str = Field(default="production")
    APP_NAME: str = Field(default="aibot-backend")
    APP_VERSION: str = Field(default="0.1.0")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()


# Global settings instance
settings = get_settings()
