"""Runtime settings loaded from environment variables.

Variables:
- DATABASE_URL: libpq DSN or postgres:// URL (required).
- DB_PASSWORD: password injected when DATABASE_URL carries none.
- ROOMLEDGER_LOCK_TIMEOUT_MS: per-transaction lock_timeout (0 disables).
- ROOMLEDGER_LOG_LEVEL: level for the JSON logger.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_LOCK_TIMEOUT_MS = 5000
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration."""

    database_url: str
    db_password: str | None = None
    lock_timeout_ms: int = DEFAULT_LOCK_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise RuntimeError(f"{name} must be >= 0, got {value}")
    return value


def load_settings() -> Settings:
    """Build Settings from the current environment.

    Raises:
        RuntimeError: If DATABASE_URL is not set or a numeric variable is invalid.
    """
    dsn = os.environ.get("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL environment variable not set")

    return Settings(
        database_url=dsn,
        db_password=os.environ.get("DB_PASSWORD") or None,
        lock_timeout_ms=_int_env("ROOMLEDGER_LOCK_TIMEOUT_MS", DEFAULT_LOCK_TIMEOUT_MS),
        log_level=os.environ.get("ROOMLEDGER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )


def get_lock_timeout_ms() -> int:
    """Lock timeout for transactions, readable without a DATABASE_URL."""
    return _int_env("ROOMLEDGER_LOCK_TIMEOUT_MS", DEFAULT_LOCK_TIMEOUT_MS)
