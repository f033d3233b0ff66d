"""Room links of a reservation - transactional booking of room types.

Every write locks the reservation, runs the overbooking guard and writes
the link in one transaction. A rejected write leaves
reservation_room_types untouched.
"""

from __future__ import annotations

import logging

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReferentialError, ReservationNotFoundError
from roomledger.domain.room_guard import assert_room_amount_allowed
from roomledger.infra.db import txn
from roomledger.infra.repositories.reservations_repository import get_reservation
from roomledger.infra.repositories.room_links_repository import (
    delete_room_link,
    get_room_link,
    list_room_links,
    upsert_room_link,
)

logger = logging.getLogger(__name__)


def _write_link(
    c: PgCursor,
    *,
    reservation_id: int,
    room_type_id: int,
    amount: int | None,
    must_exist: bool,
) -> dict:
    if get_reservation(c, reservation_id, lock=True) is None:
        raise ReservationNotFoundError(reservation_id)

    existing = get_room_link(
        c, reservation_id=reservation_id, room_type_id=room_type_id, lock=True
    )
    if existing is None and must_exist:
        raise ReferentialError("room link", (reservation_id, room_type_id))

    old_amount = existing["amount"] if existing else None
    available = assert_room_amount_allowed(
        c,
        reservation_id=reservation_id,
        room_type_id=room_type_id,
        new_amount=amount,
        old_amount=old_amount,
    )

    link = upsert_room_link(
        c,
        reservation_id=reservation_id,
        room_type_id=room_type_id,
        amount=amount,
    )
    logger.info(
        "reservation room written",
        extra={
            "extra_fields": {
                "reservation_id": reservation_id,
                "room_type_id": room_type_id,
                "amount": amount,
                "previous_amount": old_amount,
                "available_before": available,
            },
        },
    )
    return link


def add_reservation_room(
    reservation_id: int,
    room_type_id: int,
    amount: int | None,
    *,
    cur: PgCursor | None = None,
) -> dict:
    """Book rooms of a type for a reservation.

    If the reservation already holds rooms of this type, the amount is
    replaced.

    Args:
        reservation_id: Reservation identifier.
        room_type_id: Room type identifier.
        amount: Number of rooms, None if unspecified.
        cur: Optional cursor to join an outer transaction.

    Returns:
        Dict with reservation_id, room_type_id and amount.

    Raises:
        ReservationNotFoundError: If the reservation does not exist.
        ReferentialError: If the room type does not exist.
        OverbookingError: If amount exceeds availability for the stay.
        ValueError: If amount is negative.

    Example:
        add_reservation_room(2, 2, 1)
    """
    if cur is not None:
        return _write_link(
            cur,
            reservation_id=reservation_id,
            room_type_id=room_type_id,
            amount=amount,
            must_exist=False,
        )
    with txn() as c:
        return _write_link(
            c,
            reservation_id=reservation_id,
            room_type_id=room_type_id,
            amount=amount,
            must_exist=False,
        )


def set_reservation_room_amount(
    reservation_id: int,
    room_type_id: int,
    amount: int | None,
) -> dict:
    """Change the amount of an existing room link.

    Raises:
        ReferentialError: If the reservation holds no rooms of this type.
        OverbookingError: If the new amount exceeds availability.
    """
    with txn() as c:
        return _write_link(
            c,
            reservation_id=reservation_id,
            room_type_id=room_type_id,
            amount=amount,
            must_exist=True,
        )


def remove_reservation_room(reservation_id: int, room_type_id: int) -> bool:
    """Release a reservation's rooms of one type. Returns False if none held."""
    with txn() as c:
        removed = delete_room_link(
            c, reservation_id=reservation_id, room_type_id=room_type_id
        )
    if removed:
        logger.info(
            "reservation room removed",
            extra={
                "extra_fields": {
                    "reservation_id": reservation_id,
                    "room_type_id": room_type_id,
                },
            },
        )
    return removed


def list_reservation_rooms(reservation_id: int) -> list[dict]:
    with txn() as c:
        return list_room_links(c, reservation_id)
