"""Database access layer using psycopg2.

Provides:
- get_conn(): Get a database connection from DATABASE_URL
- txn(): Context manager for short, safe transactions
- fetchone/fetchall: Query helpers
- for_update(): SELECT ... FOR UPDATE helper
"""

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor, parse_dsn

from roomledger.infra.settings import get_lock_timeout_ms, load_settings


def _dsn_has_password(dsn: str) -> bool:
    """Whether a libpq key=value DSN or postgres:// URI carries a password."""
    return bool(parse_dsn(dsn).get("password"))


def get_conn() -> PgConnection:
    """Get a new database connection from DATABASE_URL.

    DB_PASSWORD is passed separately when the DSN does not carry a password.

    Returns:
        psycopg2 connection object.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: On connection failure.
    """
    settings = load_settings()
    dsn = settings.database_url
    if settings.db_password and not _dsn_has_password(dsn):
        return psycopg2.connect(dsn, password=settings.db_password)
    return psycopg2.connect(dsn)


@contextmanager
def txn(
    conn: PgConnection | None = None,
    *,
    lock_timeout_ms: int | None = None,
) -> Iterator[PgCursor]:
    """Context manager for a short, safe transaction.

    If conn is None, creates a new connection that is closed on exit.
    Commits on successful exit, rolls back on exception.

    Row locks taken inside the transaction wait at most lock_timeout_ms
    (ROOMLEDGER_LOCK_TIMEOUT_MS when not given; 0 waits forever).

    Args:
        conn: Optional existing connection. If None, creates new one.
        lock_timeout_ms: Optional lock timeout override.

    Yields:
        Cursor for executing queries within the transaction.

    Example:
        with txn() as cur:
            cur.execute("INSERT INTO t (x) VALUES (%s)", (1,))
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn()

    if lock_timeout_ms is None:
        lock_timeout_ms = get_lock_timeout_ms()

    try:
        with conn.cursor() as cur:
            if lock_timeout_ms:
                cur.execute(
                    "SELECT set_config('lock_timeout', %s, true)",
                    (f"{lock_timeout_ms}ms",),
                )
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()


def fetchone(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute query and fetch one row.

    Args:
        cur: Database cursor.
        query: SQL query with %s placeholders.
        params: Query parameters.

    Returns:
        Single row tuple or None if no results.
    """
    cur.execute(query, params)
    return cur.fetchone()


def fetchall(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> list[tuple[Any, ...]]:
    """Execute query and fetch all rows.

    Args:
        cur: Database cursor.
        query: SQL query with %s placeholders.
        params: Query parameters.

    Returns:
        List of row tuples.
    """
    cur.execute(query, params)
    return cur.fetchall()


def for_update(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute SELECT ... FOR UPDATE and fetch one row.

    Appends FOR UPDATE clause to the query. Use within a transaction
    to lock the selected row until commit/rollback.

    Args:
        cur: Database cursor.
        query: SELECT query (without FOR UPDATE).
        params: Query parameters.

    Returns:
        Single row tuple or None if no results.
    """
    full_query = query.rstrip().rstrip(";") + " FOR UPDATE"
    cur.execute(full_query, params)
    return cur.fetchone()
