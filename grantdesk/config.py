"""
Configuration and settings for the grant portal backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def normalize_database_url(url: Optional[str]) -> Optional[str]:
    """Point bare Postgres URLs at the psycopg (v3) driver."""
    if not url:
        return url
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=list)

    # Database (Postgres expected, SQLite for local runs)
    database_url: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)
    seed_on_startup: bool = Field(default=True)

    # ID tokens issued by the OpenID Connect provider. For RS256/ES256 the
    # secret holds the provider's PEM public key.
    auth_jwt_secret: str = Field(default="grantdesk-dev-secret-change-me")
    auth_jwt_algorithm: str = Field(default="HS256")
    auth_issuer: Optional[str] = Field(default=None)
    auth_audience: Optional[str] = Field(default=None)
    auth_token_ttl_hours: int = Field(default=24)

    @field_validator("database_url")
    @classmethod
    def _use_psycopg_driver(cls, value: Optional[str]) -> Optional[str]:
        return normalize_database_url(value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
