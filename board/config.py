"""
Configuration and settings for the message board service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=4000)
    cors_origins: str = Field(default="*")

    # Database (Postgres expected)
    database_url: Optional[str] = Field(default=None)

    # Firebase identity verification
    firebase_project_id: Optional[str] = Field(default=None)
    google_application_credentials: Optional[str] = Field(default=None)
    firebase_check_revoked: bool = Field(default=False)

    # Comma-separated admin e-mail addresses allowed to list messages.
    admin_emails: str = Field(default="")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    def admin_email_list(self) -> list[str]:
        return _split_csv(self.admin_emails)

    def cors_origin_list(self) -> list[str]:
        return _split_csv(self.cors_origins)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
