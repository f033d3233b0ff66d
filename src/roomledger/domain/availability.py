"""Room availability per room type and date range.

available = number_of_rooms - rooms committed by overlapping reservations

A stay is the closed interval [date_start, date_end]. A NULL date_end is an
open-ended stay and overlaps every later range. The result is not clamped:
a negative value reports existing overbooking. None means the availability
is unknown (room type missing or its inventory unmanaged), never zero.
"""

from __future__ import annotations

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from roomledger.infra.db import txn
from roomledger.infra.repositories.room_links_repository import sum_committed_rooms
from roomledger.infra.repositories.room_types_repository import get_inventory


def compute_available(inventory: int | None, committed: int) -> int | None:
    """Inventory minus committed rooms; None when inventory is unknown."""
    if inventory is None:
        return None
    return inventory - committed


def available_rooms(
    cur: PgCursor,
    *,
    room_type_id: int,
    date_from: date,
    date_to: date | None,
    exclude_reservation_id: int | None = None,
) -> int | None:
    """Compute availability inside an existing transaction.

    Args:
        cur: Database cursor.
        room_type_id: Room type identifier.
        date_from: First day of the range (inclusive).
        date_to: Last day of the range (inclusive), None if open-ended.
        exclude_reservation_id: Reservation whose own rooms are not counted.

    Returns:
        Rooms still free over the whole range, or None if unknown.

    Raises:
        ValueError: If date_to is before date_from.
    """
    if date_to is not None and date_to < date_from:
        raise ValueError("date_to must not be before date_from")

    exists, inventory = get_inventory(cur, room_type_id)
    if not exists or inventory is None:
        return None

    committed = sum_committed_rooms(
        cur,
        room_type_id=room_type_id,
        date_from=date_from,
        date_to=date_to,
        exclude_reservation_id=exclude_reservation_id,
    )
    return compute_available(inventory, committed)


def get_available_rooms(
    room_type_id: int,
    date_from: date,
    date_to: date | None,
    *,
    cur: PgCursor | None = None,
) -> int | None:
    """Number of rooms of a type still free between two dates.

    Example:
        get_available_rooms(2, date(2022, 1, 12), date(2022, 1, 16))
    """
    if cur is not None:
        return available_rooms(
            cur, room_type_id=room_type_id, date_from=date_from, date_to=date_to
        )
    with txn() as c:
        return available_rooms(
            c, room_type_id=room_type_id, date_from=date_from, date_to=date_to
        )
