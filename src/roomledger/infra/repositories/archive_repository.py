"""Archive repository - append-only snapshots of deleted reservations.

Uses raw SQL with psycopg2 (no ORM). Rows are never updated.
"""

from psycopg2.extensions import cursor as PgCursor

_COLUMNS = (
    "id",
    "reservation_id",
    "client_id",
    "is_paid",
    "date_start",
    "date_end",
    "description",
    "archived_at",
)


def insert_archive_reservation(cur: PgCursor, reservation: dict) -> dict:
    """Snapshot a reservation into the archive.

    payment_type and free_included are not archived.

    Args:
        cur: Database cursor (within transaction).
        reservation: Reservation dict as returned by get_reservation.

    Returns:
        The archive row as a dict.
    """
    cur.execute(
        f"""
        INSERT INTO archive_reservations (
            reservation_id, client_id, is_paid,
            date_start, date_end, description
        )
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {", ".join(_COLUMNS)}
        """,
        (
            reservation["id"],
            reservation["client_id"],
            reservation["is_paid"],
            reservation["date_start"],
            reservation["date_end"],
            reservation["description"],
        ),
    )
    return dict(zip(_COLUMNS, cur.fetchone()))


def list_archive_reservations(cur: PgCursor, *, client_id: int | None = None) -> list[dict]:
    """Archived reservations, oldest archive first, optionally for one client."""
    where = "WHERE client_id = %s" if client_id is not None else ""
    params = (client_id,) if client_id is not None else None
    cur.execute(
        f"""
        SELECT {", ".join(_COLUMNS)} FROM archive_reservations
        {where}
        ORDER BY archived_at, id
        """,
        params,
    )
    return [dict(zip(_COLUMNS, row)) for row in cur.fetchall()]
