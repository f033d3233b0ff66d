"""Complimentary service entitlement.

When a reservation's free_included flag turns true (from false, NULL or a
new row), every service priced exactly 0 is linked to the reservation.
Services already linked are skipped, so re-granting never duplicates.
Writing true over true, or turning the flag off, grants nothing and
removes nothing.

The grant runs in the same transaction as the reservation write that
changed the flag; if it fails, that write is rolled back too.
"""

from __future__ import annotations

import logging

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReservationNotFoundError
from roomledger.infra.db import txn
from roomledger.infra.repositories.reservations_repository import (
    get_reservation,
    update_reservation,
)
from roomledger.infra.repositories.service_links_repository import (
    insert_free_service_links,
)

logger = logging.getLogger(__name__)


def turned_on(old_value: bool | None, new_value: bool | None) -> bool:
    """Whether a free_included write is a transition to true."""
    return new_value is True and old_value is not True


def grant_free_services(
    cur: PgCursor,
    *,
    reservation_id: int,
    old_value: bool | None,
    new_value: bool | None,
) -> list[int]:
    """Hook run after a reservation insert or update.

    Args:
        cur: Database cursor of the reservation write.
        reservation_id: Reservation identifier.
        old_value: free_included before the write (None for a new row).
        new_value: free_included after the write.

    Returns:
        IDs of the services newly linked (empty if the hook did not fire).
    """
    if not turned_on(old_value, new_value):
        return []

    granted = insert_free_service_links(cur, reservation_id)
    logger.info(
        "free services granted",
        extra={
            "extra_fields": {
                "reservation_id": reservation_id,
                "granted_service_ids": granted,
            },
        },
    )
    return granted


def set_free_included(
    reservation_id: int,
    value: bool | None,
    *,
    cur: PgCursor | None = None,
) -> dict:
    """Set a reservation's free_included flag.

    Returns:
        Dict with the updated reservation under "reservation" and the
        newly granted service IDs under "granted_service_ids".

    Raises:
        ReservationNotFoundError: If the reservation does not exist.
    """

    def _do(c: PgCursor) -> dict:
        before = get_reservation(c, reservation_id, lock=True)
        if before is None:
            raise ReservationNotFoundError(reservation_id)

        after = update_reservation(c, reservation_id, {"free_included": value})
        granted = grant_free_services(
            c,
            reservation_id=reservation_id,
            old_value=before["free_included"],
            new_value=after["free_included"],
        )
        return {"reservation": after, "granted_service_ids": granted}

    if cur is not None:
        return _do(cur)
    with txn() as c:
        return _do(c)
