"""
Application Settings using Pydantic Settings
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Framework settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = Field(default="Virtual Components")
    APP_VERSION: str = Field(default="0.1.0")
    DEBUG: bool = Field(default=False)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")

    # Debug output; falls back to the terminal size when unset
    TERM_WIDTH: Optional[int] = Field(default=None)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
