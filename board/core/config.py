"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
- Falls back to ``app.env`` in the project root when no environment file exists
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

FALLBACK_ENV_FILE = "app.env"


def _resolve_env_file() -> str | None:
    """Pick the env file for APP_ENV, or the shared app.env, if present."""

    candidates = (
        ENV_FILE_MAP.get(APP_ENV, ".env.development"),
        FALLBACK_ENV_FILE,
    )
    for name in candidates:
        path = PROJECT_ROOT / name
        if path.is_file():
            return str(path)
    return None


_env_file = _resolve_env_file()


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


def _build_database_settings() -> "DatabaseSettings":
    """Build database settings from environment."""

    return DatabaseSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment."""

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()  # type: ignore[call-arg]


class DatabaseSettings(BaseSettings):
    """Post store connection configuration.

    ``DB_URL`` is the canonical variable; the bare ``DB`` key is accepted too
    so existing ``app.env`` files keep working.
    """

    url: str = Field(
        "sqlite:///./board.db",
        validation_alias=AliasChoices("DB_URL", "DB"),
        description="SQLAlchemy connection string (postgresql+psycopg://... in production)",
    )
    echo: bool = Field(
        False,
        validation_alias=AliasChoices("DB_ECHO"),
        description="Log every SQL statement",
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        populate_by_name=True,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    host: str = Field(
        "0.0.0.0",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        8080,
        description="Port the HTTP server listens on",
    )
    cors_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-identity rate limiting of post creation",
    )
    rate_limit_posts: int = Field(
        10,
        description="Maximum number of posts admitted per window (per identity)",
        ge=1,
    )
    rate_limit_window_seconds: float = Field(
        3600,
        description="Sliding window size in seconds",
        gt=0,
    )
    rate_limit_sweep_seconds: float | None = Field(
        600,
        description="Minimum seconds between sweeps of fully expired identities ('none' disables)",
        gt=0,
    )

    identity_prefix_bytes: int = Field(
        8,
        description="Number of SHA-256 digest bytes kept in the identity fingerprint",
        ge=1,
        le=32,
    )
    trust_proxy_headers: bool = Field(
        True,
        description="Resolve the client address from X-Forwarded-For / X-Real-IP",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        env_parse_none_str="none",
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(
        "INFO",
        description="Root log level",
    )
    format: str = Field(
        "json",
        description="Log format: json or plain",
    )
    output: str = Field(
        "stdout",
        description="Log destination: stdout or file",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file",
    )
    max_bytes: int = Field(
        10_485_760,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Number of rotated log files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    database: DatabaseSettings = Field(default_factory=_build_database_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
