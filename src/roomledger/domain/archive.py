"""Reservation deletion through the archive.

Orchestrates deletion inside a single DB transaction:
lock → snapshot into archive → delete service links → delete room links → delete reservation.

If any step fails nothing is committed: the reservation is never removed
without its archive row.
"""

from __future__ import annotations

import logging

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReservationNotFoundError
from roomledger.infra.db import txn
from roomledger.infra.repositories.archive_repository import (
    insert_archive_reservation,
    list_archive_reservations,
)
from roomledger.infra.repositories.reservations_repository import (
    delete_reservation_row,
    get_reservation,
)
from roomledger.infra.repositories.room_links_repository import (
    delete_room_links_for_reservation,
)
from roomledger.infra.repositories.service_links_repository import (
    delete_service_links_for_reservation,
)

logger = logging.getLogger(__name__)


def delete_reservation(reservation_id: int, *, cur: PgCursor | None = None) -> dict:
    """Archive a reservation, then delete it with its room and service links.

    Args:
        reservation_id: Reservation identifier.
        cur: Optional cursor to join an outer transaction.

    Returns:
        The archive row as a dict, plus "released_rooms" and
        "released_services" counts of the links removed with it.

    Raises:
        ReservationNotFoundError: If the reservation does not exist.

    Example:
        delete_reservation(3)
    """

    def _do(c: PgCursor) -> dict:
        reservation = get_reservation(c, reservation_id, lock=True)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)

        archived = insert_archive_reservation(c, reservation)
        released_services = delete_service_links_for_reservation(c, reservation_id)
        released_rooms = delete_room_links_for_reservation(c, reservation_id)

        if not delete_reservation_row(c, reservation_id):
            raise ReservationNotFoundError(reservation_id)

        logger.info(
            "reservation archived",
            extra={
                "extra_fields": {
                    "reservation_id": reservation_id,
                    "archive_id": archived["id"],
                    "released_rooms": released_rooms,
                    "released_services": released_services,
                },
            },
        )
        return {
            **archived,
            "released_rooms": released_rooms,
            "released_services": released_services,
        }

    if cur is not None:
        return _do(cur)
    with txn() as c:
        return _do(c)


def list_archived_reservations(client_id: int | None = None) -> list[dict]:
    with txn() as c:
        return list_archive_reservations(c, client_id=client_id)
