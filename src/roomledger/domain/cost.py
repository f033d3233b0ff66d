"""Reservation cost.

Pure calculation in total_cost(); get_total_cost() fetches the prices.

total = sum of the price of every linked room type (one per link)
      + sum of the price of every linked service

A linked room type or service without a price makes the total unknown
(None), the same way unmanaged inventory makes availability unknown.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReservationNotFoundError
from roomledger.infra.db import fetchall, txn
from roomledger.infra.repositories.reservations_repository import get_reservation

logger = logging.getLogger(__name__)


def _first_unpriced(
    prices: list[tuple[int, Decimal | float | None]],
) -> int | None:
    for entity_id, price in prices:
        if price is None:
            return entity_id
    return None


def total_cost(
    room_prices: Iterable[tuple[int, Decimal | float | None]],
    service_prices: Iterable[tuple[int, Decimal | float | None]],
) -> float | None:
    """Sum linked prices.

    Args:
        room_prices: (room_type_id, price) per linked room type.
        service_prices: (service_id, price) per linked service.

    Returns:
        The total, or None when nothing is linked or a linked price is NULL.
    """
    room_prices = list(room_prices)
    service_prices = list(service_prices)
    if not room_prices and not service_prices:
        return None

    for what, prices in (("room type price", room_prices), ("service price", service_prices)):
        entity_id = _first_unpriced(prices)
        if entity_id is not None:
            logger.warning(
                "cost unknown, linked price not set",
                extra={"extra_fields": {"unknown": what, "entity_id": entity_id}},
            )
            return None

    total = sum((Decimal(str(price)) for _, price in room_prices + service_prices), Decimal(0))
    return float(total)


def get_total_cost(reservation_id: int, *, cur: PgCursor | None = None) -> float | None:
    """Total cost of a reservation's rooms and services.

    Returns:
        The total, or None when nothing is linked or a linked room type or
        service has no price.

    Raises:
        ReservationNotFoundError: If the reservation does not exist.

    Example:
        get_total_cost(2)
    """

    def _do(c: PgCursor) -> float | None:
        if get_reservation(c, reservation_id) is None:
            raise ReservationNotFoundError(reservation_id)

        rooms = fetchall(
            c,
            """
            SELECT rt.id, rt.price
            FROM reservation_room_types rrt
            JOIN room_types rt ON rt.id = rrt.room_type_id
            WHERE rrt.reservation_id = %s
            ORDER BY rt.id
            """,
            (reservation_id,),
        )
        services = fetchall(
            c,
            """
            SELECT s.id, s.price
            FROM reservation_services rs
            JOIN services s ON s.id = rs.service_id
            WHERE rs.reservation_id = %s
            ORDER BY s.id
            """,
            (reservation_id,),
        )
        return total_cost(rooms, services)

    if cur is not None:
        return _do(cur)
    with txn() as c:
        return _do(c)
