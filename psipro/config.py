"""Configuration management for PsiPro."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Record store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./psipro.db",
        description="SQLAlchemy async DSN (e.g. postgresql+psycopg://user:pw@host/psipro)",
    )

    # Auth
    jwt_secret: str = Field(
        default="change-me",
        description="Secret used to sign access tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 12)

    # Agenda grid
    agenda_start_hour: int = Field(default=7, ge=0, le=23)
    agenda_end_hour: int = Field(default=20, ge=1, le=24)
    slot_minutes: int = Field(
        default=60,
        gt=0,
        description="Visual slot interval in minutes",
    )

    # Booking rules
    recurrence_occurrences: int = Field(
        default=12,
        ge=1,
        description="Weekly occurrences attempted by a recurring booking",
    )
    default_session_value: float = Field(default=150.0, ge=0)
    min_duration_minutes: int = Field(default=10, gt=0)
    max_duration_minutes: int = Field(default=240, gt=0)
    embed_legacy_justification: bool = Field(
        default=False,
        description="Also write the absence justification marker into the raw notes column",
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8080)

    # CORS
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    # Debug
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (exposes error details in responses)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
