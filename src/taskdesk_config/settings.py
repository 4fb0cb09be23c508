"""Identity store settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. TASKDESK_ENV_FILE environment variable (path to a .env file)
3. config/.env.dev - local development
4. config/.env - packaged/production defaults

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent

    return Path.cwd()


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. TASKDESK_ENV_FILE env var (full or project-relative path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("TASKDESK_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Identity store configuration.

    Values are loaded from:
    1. OS environment variables with the TASKDESK_ prefix (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKDESK_",
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "TaskDesk"

    # Record store (durable users/tokens tables)
    database_url: str = "sqlite+aiosqlite:///./taskdesk.db"
    database_echo: bool = False

    # Local storage (session, current token, remembered users)
    # None keeps everything in memory for the lifetime of the process
    local_storage_path: Path | None = None

    # Lockout
    max_failed_login_attempts: int = 5
    lockout_duration_minutes: int = 15

    # Remember me
    remember_token_expire_days: int = 30

    # Sessions (None or 0 = no absolute expiry)
    session_max_age_hours: int | None = 24

    # Password hashing
    bcrypt_rounds: int = 12

    # Logging
    log_level: str = "INFO"

    @field_validator("session_max_age_hours", mode="before")
    @classmethod
    def _validate_session_max_age(cls, v: Any) -> int | None:
        """Treat empty strings and zero as "sessions never expire"."""
        if v in (None, "", 0, "0"):
            return None
        return int(v)

    @field_validator("max_failed_login_attempts", "lockout_duration_minutes")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            msg = "must be at least 1"
            raise ValueError(msg)
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached identity store settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
