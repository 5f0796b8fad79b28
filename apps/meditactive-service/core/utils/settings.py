"""Environment-backed settings for the persistence layer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _normalize_bool(value: str | None, default: bool = False) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def database_url_from_env() -> str:
    """Return DATABASE_URL or compose one from the POSTGRES_* components."""
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    db_user = os.getenv("POSTGRES_USER")
    db_password = os.getenv("POSTGRES_PASSWORD")
    db_host = os.getenv("POSTGRES_HOST")
    db_port = os.getenv("POSTGRES_PORT")
    db_name = os.getenv("POSTGRES_DB")

    if not all([db_user, db_password, db_host, db_port, db_name]):
        missing = []
        if not db_user: missing.append("POSTGRES_USER")
        if not db_password: missing.append("POSTGRES_PASSWORD")
        if not db_host: missing.append("POSTGRES_HOST")
        if not db_port: missing.append("POSTGRES_PORT")
        if not db_name: missing.append("POSTGRES_DB")
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


@dataclass(frozen=True)
class PoolSettings:
    size: int = 10
    max_overflow: int = 0
    timeout: int = 30
    recycle: int = 1800


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    pool: PoolSettings
    diagnostic_errors: bool


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return the cached settings sourced from the environment.

    ``database_url`` is left as None when nothing is configured so the engine
    module can decide on its own fallback (in-memory SQLite under pytest).
    """
    try:
        url: Optional[str] = database_url_from_env()
    except ValueError:
        url = None
    pool = PoolSettings(
        size=_int_env("DB_POOL_SIZE", 10),
        max_overflow=_int_env("DB_MAX_OVERFLOW", 0),
        timeout=_int_env("DB_POOL_TIMEOUT", 30),
        recycle=_int_env("DB_POOL_RECYCLE", 1800),
    )
    return Settings(
        database_url=url,
        pool=pool,
        diagnostic_errors=_normalize_bool(os.getenv("DIAGNOSTIC_ERRORS"), default=False),
    )


def diagnostic_errors_enabled() -> bool:
    """Whether rendered errors may carry internal detail."""
    return get_settings().diagnostic_errors


def refresh_settings_cache() -> None:
    """Invalidate cached settings (useful for tests)."""
    get_settings.cache_clear()
