"""Overbooking guard for reservation room links.

Runs before every insert or update of a reservation_room_types row with a
non-NULL amount. The room type row is locked FOR UPDATE first, so two
concurrent bookings of the same type are checked and written one after the
other.

Rules:
- amount NULL: unspecified, never checked.
- amount unchanged: already committed, not re-checked.
- otherwise: availability over the reservation's stay, not counting the
  reservation's own rooms, must be >= amount.

Lock order is reservation, then room types by ascending id.
"""

from __future__ import annotations

import logging

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.availability import available_rooms
from roomledger.domain.errors import (
    OverbookingError,
    ReferentialError,
    ReservationNotFoundError,
)
from roomledger.infra.repositories.reservations_repository import get_reservation
from roomledger.infra.repositories.room_types_repository import get_room_type

logger = logging.getLogger(__name__)


def needs_check(new_amount: int | None, old_amount: int | None) -> bool:
    """Whether a link write must be validated against availability."""
    if new_amount is None:
        return False
    return old_amount is None or new_amount != old_amount


def assert_room_amount_allowed(
    cur: PgCursor,
    *,
    reservation_id: int,
    room_type_id: int,
    new_amount: int | None,
    old_amount: int | None = None,
) -> int | None:
    """Raise OverbookingError if the new amount does not fit.

    Args:
        cur: Database cursor (must be inside a transaction).
        reservation_id: Reservation owning the link.
        room_type_id: Room type of the link.
        new_amount: Amount about to be written.
        old_amount: Amount currently stored, None for a new link.

    Returns:
        The availability the amount was checked against, or None when no
        check ran or the inventory is unmanaged.

    Raises:
        ValueError: If new_amount is negative.
        ReservationNotFoundError: If the reservation does not exist.
        ReferentialError: If the room type does not exist.
        OverbookingError: If availability is less than new_amount.
    """
    if new_amount is not None and new_amount < 0:
        raise ValueError("amount must be >= 0")

    if not needs_check(new_amount, old_amount):
        return None

    reservation = get_reservation(cur, reservation_id)
    if reservation is None:
        raise ReservationNotFoundError(reservation_id)

    room_type = get_room_type(cur, room_type_id, lock=True)
    if room_type is None:
        raise ReferentialError("room type", room_type_id)

    available = available_rooms(
        cur,
        room_type_id=room_type_id,
        date_from=reservation["date_start"],
        date_to=reservation["date_end"],
        exclude_reservation_id=reservation_id,
    )

    if available is None:
        logger.warning(
            "room inventory unmanaged, amount not checked",
            extra={
                "extra_fields": {
                    "room_type_id": room_type_id,
                    "reservation_id": reservation_id,
                    "requested": new_amount,
                },
            },
        )
        return None

    if available < new_amount:
        logger.warning(
            "overbooking rejected",
            extra={
                "extra_fields": {
                    "room_type_id": room_type_id,
                    "reservation_id": reservation_id,
                    "requested": new_amount,
                    "available": available,
                    "date_start": reservation["date_start"].isoformat(),
                    "date_end": (
                        reservation["date_end"].isoformat()
                        if reservation["date_end"]
                        else None
                    ),
                },
            },
        )
        raise OverbookingError(room_type_id, new_amount, available)

    return available
