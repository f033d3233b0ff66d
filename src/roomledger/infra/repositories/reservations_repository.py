"""Reservations repository - persistence for reservation records.

Uses raw SQL with psycopg2 (no ORM).
"""

from datetime import date

from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReferentialError
from roomledger.infra.db import fetchone, for_update

_COLUMNS = (
    "id",
    "client_id",
    "payment_type",
    "is_paid",
    "free_included",
    "date_start",
    "date_end",
    "description",
)

# Columns a caller may change after creation.
UPDATABLE_COLUMNS = frozenset(
    {"payment_type", "is_paid", "free_included", "date_start", "date_end", "description"}
)


def _row_to_dict(row: tuple) -> dict:
    return dict(zip(_COLUMNS, row))


def insert_reservation(
    cur: PgCursor,
    *,
    client_id: int,
    date_start: date,
    date_end: date | None = None,
    payment_type: str | None = None,
    is_paid: bool | None = None,
    free_included: bool | None = None,
    description: str | None = None,
) -> dict:
    """Insert a reservation row.

    Args:
        cur: Database cursor (within transaction).
        client_id: Owning client.
        date_start: First day of the stay.
        date_end: Last day of the stay, None for an open-ended stay.
        payment_type: Free-text payment method.
        is_paid: Tri-state paid flag.
        free_included: Tri-state free-services flag.
        description: Optional note.

    Returns:
        The inserted reservation as a dict.

    Raises:
        ReferentialError: If the client does not exist.
    """
    try:
        cur.execute(
            f"""
            INSERT INTO reservations (
                client_id, payment_type, is_paid, free_included,
                date_start, date_end, description
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {", ".join(_COLUMNS)}
            """,
            (
                client_id,
                payment_type,
                is_paid,
                free_included,
                date_start,
                date_end,
                description,
            ),
        )
    except pg_errors.ForeignKeyViolation:
        raise ReferentialError("client", client_id) from None
    return _row_to_dict(cur.fetchone())


def get_reservation(
    cur: PgCursor,
    reservation_id: int,
    *,
    lock: bool = False,
) -> dict | None:
    """Retrieve a reservation by ID.

    Args:
        cur: Database cursor.
        reservation_id: Reservation identifier.
        lock: If True, lock the row FOR UPDATE until the transaction ends.

    Returns:
        Dict with reservation data or None if not found.
    """
    query = f"SELECT {', '.join(_COLUMNS)} FROM reservations WHERE id = %s"
    if lock:
        row = for_update(cur, query, (reservation_id,))
    else:
        row = fetchone(cur, query, (reservation_id,))
    if row is None:
        return None
    return _row_to_dict(row)


def update_reservation(cur: PgCursor, reservation_id: int, fields: dict) -> dict | None:
    """Apply column updates to a reservation.

    Args:
        cur: Database cursor (within transaction).
        reservation_id: Reservation identifier.
        fields: Mapping of column name to new value; keys must be in
            UPDATABLE_COLUMNS.

    Returns:
        The updated reservation, or None if it does not exist.

    Raises:
        ValueError: If fields names a column that cannot be updated.
    """
    unknown = set(fields) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update reservation columns: {sorted(unknown)}")
    if not fields:
        return get_reservation(cur, reservation_id)

    names = sorted(fields)
    assignments = ", ".join(f"{name} = %s" for name in names)
    cur.execute(
        f"""
        UPDATE reservations SET {assignments}
        WHERE id = %s
        RETURNING {", ".join(_COLUMNS)}
        """,
        [fields[name] for name in names] + [reservation_id],
    )
    row = cur.fetchone()
    if row is None:
        return None
    return _row_to_dict(row)


def delete_reservation_row(cur: PgCursor, reservation_id: int) -> bool:
    """Delete the reservation row itself. Child links must already be gone.

    Returns:
        True if a row was deleted.
    """
    cur.execute("DELETE FROM reservations WHERE id = %s", (reservation_id,))
    return cur.rowcount == 1
