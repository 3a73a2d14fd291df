"""Application settings loaded from environment variables and .env."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration, read once at startup and never mutated.

    Values come from the environment, then from a ``.env`` file in the
    working directory when present.
    """

    PORT: int = Field(default=3000, ge=1, le=65535, description="Listening port")
    HOST: str = Field(default="0.0.0.0", description="Interface to bind")

    SENTRY_DSN: str | None = Field(
        default=None, description="Error tracking DSN; tracking is off when unset"
    )
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=1.0, ge=0.0, le=1.0)

    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = Field(
        default=False, description="Record pipeline traces and expose error details"
    )
    LOG_LEVEL: str = "INFO"

    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=16)
    MAX_BODY_BYTES: int = Field(default=100 * 1024, ge=1)

    APP_TITLE: str = "Todo API"
    APP_VERSION: str = "1.0.0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )


def load_settings(**overrides: object) -> Settings:
    """Build the settings instance for this process."""
    return Settings(**overrides)  # type: ignore[arg-type]
