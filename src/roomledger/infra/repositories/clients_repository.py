"""Clients repository - guests who own reservations.

Uses raw SQL with psycopg2 (no ORM).
passport_number is UNIQUE across all clients; a duplicate insert is
reported as UniquenessError.
"""

from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import UniquenessError

_COLUMNS = ("id", "last_name", "first_name", "phone", "is_trusted", "passport_number")


def insert_client(
    cur: PgCursor,
    *,
    last_name: str,
    first_name: str,
    passport_number: str,
    phone: str | None = None,
    is_trusted: bool | None = None,
) -> dict:
    """Insert a client.

    Raises:
        UniquenessError: If passport_number is already registered.
    """
    try:
        cur.execute(
            f"""
            INSERT INTO clients (last_name, first_name, phone, is_trusted, passport_number)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {", ".join(_COLUMNS)}
            """,
            (last_name, first_name, phone, is_trusted, passport_number),
        )
    except pg_errors.UniqueViolation:
        raise UniquenessError("passport_number", passport_number) from None
    return dict(zip(_COLUMNS, cur.fetchone()))


def get_client(cur: PgCursor, client_id: int) -> dict | None:
    cur.execute(
        f"SELECT {', '.join(_COLUMNS)} FROM clients WHERE id = %s",
        (client_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return dict(zip(_COLUMNS, row))


def update_trusted(cur: PgCursor, client_id: int, is_trusted: bool | None) -> bool:
    """Set the tri-state trusted flag. Returns False if the client is missing."""
    cur.execute(
        "UPDATE clients SET is_trusted = %s WHERE id = %s",
        (is_trusted, client_id),
    )
    return cur.rowcount == 1
