"""Reservation writes with their consistency hooks.

Hooks run synchronously in the write's transaction:
- free-service entitlement after every insert or update
- overbooking re-check of held rooms when the stay dates change
"""

from __future__ import annotations

import logging
from datetime import date

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReservationNotFoundError
from roomledger.domain.free_services import grant_free_services
from roomledger.domain.room_guard import assert_room_amount_allowed
from roomledger.infra.db import txn
from roomledger.infra.repositories.reservations_repository import (
    get_reservation as _get_reservation,
    insert_reservation,
    update_reservation as _update_reservation,
)
from roomledger.infra.repositories.room_links_repository import list_room_links
from roomledger.infra.repositories.service_links_repository import (
    add_service_link,
    delete_service_link,
    list_service_ids,
)

logger = logging.getLogger(__name__)


def _validate_stay(date_start: date | None, date_end: date | None) -> None:
    if date_start is None:
        raise ValueError("date_start is required")
    if date_end is not None and date_end < date_start:
        raise ValueError("date_end must not be before date_start")


def create_reservation(
    *,
    client_id: int,
    date_start: date,
    date_end: date | None = None,
    payment_type: str | None = None,
    is_paid: bool | None = None,
    free_included: bool | None = None,
    description: str | None = None,
    cur: PgCursor | None = None,
) -> dict:
    """Create a reservation.

    A reservation created with free_included=True receives every free
    service in the same transaction.

    Returns:
        Dict with the reservation under "reservation" and the newly granted
        service IDs under "granted_service_ids".

    Raises:
        ValueError: If date_end is before date_start.
        ReferentialError: If the client does not exist.
    """
    _validate_stay(date_start, date_end)

    def _do(c: PgCursor) -> dict:
        reservation = insert_reservation(
            c,
            client_id=client_id,
            date_start=date_start,
            date_end=date_end,
            payment_type=payment_type,
            is_paid=is_paid,
            free_included=free_included,
            description=description,
        )
        granted = grant_free_services(
            c,
            reservation_id=reservation["id"],
            old_value=None,
            new_value=reservation["free_included"],
        )
        logger.info(
            "reservation created",
            extra={
                "extra_fields": {
                    "reservation_id": reservation["id"],
                    "client_id": client_id,
                    "date_start": date_start.isoformat(),
                    "date_end": date_end.isoformat() if date_end else None,
                },
            },
        )
        return {"reservation": reservation, "granted_service_ids": granted}

    if cur is not None:
        return _do(cur)
    with txn() as c:
        return _do(c)


def update_reservation(reservation_id: int, **fields) -> dict:
    """Update reservation columns.

    Accepted fields: payment_type, is_paid, free_included, date_start,
    date_end, description.

    If the stay dates change, every held room amount is validated again
    against the new dates. If free_included turns true, free services are
    granted.

    Returns:
        Dict with the updated reservation under "reservation" and the newly
        granted service IDs under "granted_service_ids".

    Raises:
        ReservationNotFoundError: If the reservation does not exist.
        OverbookingError: If the new dates do not fit the held rooms.
        ValueError: If a field is not updatable or the dates are inverted.
    """
    with txn() as c:
        before = _get_reservation(c, reservation_id, lock=True)
        if before is None:
            raise ReservationNotFoundError(reservation_id)

        date_start = fields.get("date_start", before["date_start"])
        date_end = fields.get("date_end", before["date_end"])
        _validate_stay(date_start, date_end)

        after = _update_reservation(c, reservation_id, fields)

        if (date_start, date_end) != (before["date_start"], before["date_end"]):
            for link in list_room_links(c, reservation_id):
                # old_amount=None: the amount was validated against other dates
                assert_room_amount_allowed(
                    c,
                    reservation_id=reservation_id,
                    room_type_id=link["room_type_id"],
                    new_amount=link["amount"],
                    old_amount=None,
                )

        granted = grant_free_services(
            c,
            reservation_id=reservation_id,
            old_value=before["free_included"],
            new_value=after["free_included"],
        )
        return {"reservation": after, "granted_service_ids": granted}


def get_reservation(reservation_id: int) -> dict:
    """Reservation with its room links and service IDs.

    Raises:
        ReservationNotFoundError: If the reservation does not exist.
    """
    with txn() as c:
        reservation = _get_reservation(c, reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        reservation["rooms"] = list_room_links(c, reservation_id)
        reservation["service_ids"] = list_service_ids(c, reservation_id)
        return reservation


def add_reservation_service(reservation_id: int, service_id: int) -> bool:
    """Include a service in a reservation.

    Returns:
        True if newly included, False if it already was.

    Raises:
        ReservationNotFoundError: If the reservation does not exist.
        ReferentialError: If the service does not exist.
    """
    with txn() as c:
        if _get_reservation(c, reservation_id, lock=True) is None:
            raise ReservationNotFoundError(reservation_id)
        return add_service_link(c, reservation_id=reservation_id, service_id=service_id)


def remove_reservation_service(reservation_id: int, service_id: int) -> bool:
    """Drop a service from a reservation. Returns False if it was not included."""
    with txn() as c:
        return delete_service_link(c, reservation_id=reservation_id, service_id=service_id)
