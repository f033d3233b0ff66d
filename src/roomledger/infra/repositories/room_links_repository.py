"""Reservation room links - how many rooms of each type a reservation holds.

Uses raw SQL with psycopg2 (no ORM).
"""

from datetime import date

from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReferentialError
from roomledger.infra.db import fetchone, for_update


def sum_committed_rooms(
    cur: PgCursor,
    *,
    room_type_id: int,
    date_from: date,
    date_to: date | None,
    exclude_reservation_id: int | None = None,
) -> int:
    """Sum room amounts of a type held by reservations overlapping a range.

    Stays are closed intervals [date_start, date_end]; a NULL date_end (and
    a None date_to) is unbounded. Overlap formula:
    (existing.date_start <= date_to) AND (existing.date_end >= date_from)

    NULL amounts count as zero.

    Args:
        cur: Database cursor.
        room_type_id: Room type identifier.
        date_from: First day of the queried range (inclusive).
        date_to: Last day of the queried range (inclusive), None if open.
        exclude_reservation_id: Reservation whose links are left out.

    Returns:
        Committed room count (0 when nothing overlaps).
    """
    conditions = [
        "rrt.room_type_id = %s",
        "r.date_start <= COALESCE(%s::date, 'infinity'::date)",
        "COALESCE(r.date_end, 'infinity'::date) >= %s",
    ]
    params: list = [room_type_id, date_to, date_from]

    if exclude_reservation_id is not None:
        conditions.append("r.id <> %s")
        params.append(exclude_reservation_id)

    where = " AND ".join(conditions)
    cur.execute(
        f"""
        SELECT COALESCE(SUM(rrt.amount), 0)
        FROM reservation_room_types rrt
        JOIN reservations r ON r.id = rrt.reservation_id
        WHERE {where}
        """,
        params,
    )
    row = cur.fetchone()
    return int(row[0]) if row and row[0] is not None else 0


def get_room_link(
    cur: PgCursor,
    *,
    reservation_id: int,
    room_type_id: int,
    lock: bool = False,
) -> dict | None:
    """Retrieve one reservation/room-type link.

    Returns:
        Dict with reservation_id, room_type_id and amount, or None.
    """
    query = """
        SELECT reservation_id, room_type_id, amount
        FROM reservation_room_types
        WHERE reservation_id = %s AND room_type_id = %s
    """
    params = (reservation_id, room_type_id)
    row = for_update(cur, query, params) if lock else fetchone(cur, query, params)
    if row is None:
        return None
    return {"reservation_id": row[0], "room_type_id": row[1], "amount": row[2]}


def upsert_room_link(
    cur: PgCursor,
    *,
    reservation_id: int,
    room_type_id: int,
    amount: int | None,
) -> dict:
    """Insert a link, or replace the amount of an existing one.

    Raises:
        ReferentialError: If the room type does not exist.
    """
    try:
        cur.execute(
            """
            INSERT INTO reservation_room_types (reservation_id, room_type_id, amount)
            VALUES (%s, %s, %s)
            ON CONFLICT (reservation_id, room_type_id)
            DO UPDATE SET amount = EXCLUDED.amount
            RETURNING reservation_id, room_type_id, amount
            """,
            (reservation_id, room_type_id, amount),
        )
    except pg_errors.ForeignKeyViolation:
        raise ReferentialError("room type", room_type_id) from None
    row = cur.fetchone()
    return {"reservation_id": row[0], "room_type_id": row[1], "amount": row[2]}


def delete_room_link(cur: PgCursor, *, reservation_id: int, room_type_id: int) -> bool:
    cur.execute(
        """
        DELETE FROM reservation_room_types
        WHERE reservation_id = %s AND room_type_id = %s
        """,
        (reservation_id, room_type_id),
    )
    return cur.rowcount == 1


def delete_room_links_for_reservation(cur: PgCursor, reservation_id: int) -> int:
    """Delete every room link of a reservation. Returns the number removed."""
    cur.execute(
        "DELETE FROM reservation_room_types WHERE reservation_id = %s",
        (reservation_id,),
    )
    return cur.rowcount


def list_room_links(cur: PgCursor, reservation_id: int) -> list[dict]:
    cur.execute(
        """
        SELECT reservation_id, room_type_id, amount
        FROM reservation_room_types
        WHERE reservation_id = %s
        ORDER BY room_type_id
        """,
        (reservation_id,),
    )
    return [
        {"reservation_id": row[0], "room_type_id": row[1], "amount": row[2]}
        for row in cur.fetchall()
    ]
