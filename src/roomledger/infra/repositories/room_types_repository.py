"""Room types repository - room categories and their inventory.

Uses raw SQL with psycopg2 (no ORM).
"""

from psycopg2.extensions import cursor as PgCursor

from roomledger.infra.db import fetchone, for_update

_COLUMNS = (
    "id",
    "name",
    "price",
    "capacity",
    "is_vip",
    "number_of_rooms",
    "description",
)


def _row_to_dict(row: tuple) -> dict:
    data = dict(zip(_COLUMNS, row))
    if data["price"] is not None:
        data["price"] = float(data["price"])
    return data


def insert_room_type(
    cur: PgCursor,
    *,
    name: str,
    price: float | None = None,
    capacity: int | None = None,
    is_vip: bool | None = None,
    number_of_rooms: int | None = None,
    description: str | None = None,
) -> dict:
    """Insert a room type.

    Args:
        cur: Database cursor (within transaction).
        name: Display name, e.g. "Suite".
        price: Price per room, None if not set.
        capacity: Guests per room.
        is_vip: Tri-state VIP flag.
        number_of_rooms: Total inventory, None if unmanaged.
        description: Optional note.

    Returns:
        The inserted room type as a dict.
    """
    cur.execute(
        f"""
        INSERT INTO room_types (name, price, capacity, is_vip, number_of_rooms, description)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {", ".join(_COLUMNS)}
        """,
        (name, price, capacity, is_vip, number_of_rooms, description),
    )
    return _row_to_dict(cur.fetchone())


def get_room_type(cur: PgCursor, room_type_id: int, *, lock: bool = False) -> dict | None:
    """Retrieve a room type by ID.

    Args:
        cur: Database cursor.
        room_type_id: Room type identifier.
        lock: If True, lock the row FOR UPDATE. Booking writes lock the room
            type so that check-then-write is serialized per room type.

    Returns:
        Dict with room type data or None if not found.
    """
    query = f"SELECT {', '.join(_COLUMNS)} FROM room_types WHERE id = %s"
    if lock:
        row = for_update(cur, query, (room_type_id,))
    else:
        row = fetchone(cur, query, (room_type_id,))
    if row is None:
        return None
    return _row_to_dict(row)


def get_inventory(cur: PgCursor, room_type_id: int) -> tuple[bool, int | None]:
    """Return (exists, number_of_rooms) for a room type."""
    cur.execute(
        "SELECT number_of_rooms FROM room_types WHERE id = %s",
        (room_type_id,),
    )
    row = cur.fetchone()
    if row is None:
        return (False, None)
    return (True, row[0])
