"""
Configuration and settings for the cadastro API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)
    log_level: str = Field(default="INFO")

    # Firebase Realtime Database
    firebase_database_url: Optional[str] = Field(default=None)
    firebase_credentials: Optional[str] = Field(
        default="firebase-credentials.json"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="CADASTRO_USE_IN_MEMORY_BACKENDS"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
