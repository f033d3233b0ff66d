"""Database URL helpers for Alembic migrations.

Extracted so they can be tested without triggering alembic.context at import time.
"""

from __future__ import annotations

import os

from psycopg2.extensions import parse_dsn
from sqlalchemy.engine import URL, make_url

_DRIVER = "postgresql+psycopg2"


def _libpq_dsn_to_url(dsn: str, password: str | None = None) -> URL:
    """Convert a libpq key=value DSN to a SQLAlchemy URL.

    A host starting with "/" is a Unix socket directory and is passed as
    the ?host= query parameter.
    """
    parts = parse_dsn(dsn)
    host = parts.get("host", "localhost")
    common = {
        "username": parts.get("user"),
        "password": parts.get("password") or password,
        "database": parts.get("dbname"),
    }
    if host.startswith("/"):
        return URL.create(_DRIVER, query={"host": host}, **common)
    return URL.create(
        _DRIVER,
        host=host,
        port=int(parts.get("port", 5432)),
        **common,
    )


def _url_to_url(url: str, password: str | None = None) -> URL:
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    parsed = make_url(url)
    if parsed.drivername == "postgresql":
        parsed = parsed.set(drivername=_DRIVER)
    if password and not parsed.password:
        parsed = parsed.set(password=password)
    return parsed


def get_database_url() -> str:
    """SQLAlchemy URL for DATABASE_URL, with DB_PASSWORD filled in if missing."""
    raw = os.environ.get("DATABASE_URL")
    if not raw:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    password = os.environ.get("DB_PASSWORD") or None
    if "://" in raw:
        url = _url_to_url(raw, password)
    else:
        url = _libpq_dsn_to_url(raw, password)
    return url.render_as_string(hide_password=False)
