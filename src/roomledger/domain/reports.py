"""Read-side reports over reservations, the archive and the catalog.

All functions are read-only except fill_missing_service_prices.
"""

from __future__ import annotations

import logging

from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.cost import get_total_cost
from roomledger.infra.db import fetchall, txn

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_PRICE = 50
BASIC_SERVICE_PRICE = 70


def _run(cur: PgCursor | None, fn):
    if cur is not None:
        return fn(cur)
    with txn() as c:
        return fn(c)


def reservation_descriptions(*, cur: PgCursor | None = None) -> list[dict]:
    """Current and archived reservations that carry a description."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT id, description, 'current' AS relevance
            FROM reservations WHERE description IS NOT NULL
            UNION ALL
            SELECT reservation_id, description, 'archive'
            FROM archive_reservations WHERE description IS NOT NULL
            ORDER BY 1, 3
            """,
        )
        return [
            {"reservation_id": r[0], "description": r[1], "relevance": r[2]}
            for r in rows
        ]

    return _run(cur, _do)


def room_types_by_occupancy(*, cur: PgCursor | None = None) -> list[dict]:
    """Booked room types ordered by total reserved rooms, most booked first."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT rt.id, rt.name, rt.is_vip, COALESCE(SUM(rrt.amount), 0) AS reserved
            FROM room_types rt
            JOIN reservation_room_types rrt ON rrt.room_type_id = rt.id
            GROUP BY rt.id
            ORDER BY reserved DESC, rt.id
            """,
        )
        return [
            {"room_type_id": r[0], "name": r[1], "is_vip": r[2], "reserved": int(r[3])}
            for r in rows
        ]

    return _run(cur, _do)


def staff_basic_services(*, cur: PgCursor | None = None) -> list[dict]:
    """Staff members and the services they offer as a basic duty."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT ss.staff_id, s.id, s.name
            FROM staff_services ss
            JOIN services s ON s.id = ss.service_id
            WHERE ss.is_basic_service
            ORDER BY ss.staff_id, s.id
            """,
        )
        return [
            {"staff_id": r[0], "service_id": r[1], "service_name": r[2]} for r in rows
        ]

    return _run(cur, _do)


def services_by_booking_frequency(*, cur: PgCursor | None = None) -> list[dict]:
    """Booked services with how many reservations include them, least booked first."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT s.id, s.name, COUNT(*) AS bookings
            FROM reservation_services rs
            JOIN services s ON s.id = rs.service_id
            GROUP BY s.id
            ORDER BY bookings, s.id
            """,
        )
        return [{"service_id": r[0], "name": r[1], "bookings": r[2]} for r in rows]

    return _run(cur, _do)


def arrivals(*, cur: PgCursor | None = None) -> list[dict]:
    """Client names with reservation start dates, earliest first."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT r.id, c.last_name, c.first_name, r.date_start
            FROM reservations r
            JOIN clients c ON c.id = r.client_id
            ORDER BY r.date_start, r.id
            """,
        )
        return [
            {
                "reservation_id": r[0],
                "last_name": r[1],
                "first_name": r[2],
                "date_start": r[3],
            }
            for r in rows
        ]

    return _run(cur, _do)


def unpaid_trusted_reservations(*, cur: PgCursor | None = None) -> list[dict]:
    """Reservations not paid yet whose client is trusted."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT r.id, c.id, c.last_name, c.first_name
            FROM reservations r
            JOIN clients c ON c.id = r.client_id
            WHERE r.is_paid IS FALSE AND c.is_trusted IS TRUE
            ORDER BY r.id
            """,
        )
        return [
            {
                "reservation_id": r[0],
                "client_id": r[1],
                "last_name": r[2],
                "first_name": r[3],
            }
            for r in rows
        ]

    return _run(cur, _do)


def cost_without_free_services(*, cur: PgCursor | None = None) -> list[dict]:
    """Total cost of every reservation whose client declined free services.

    Only reservations with free_included false are listed; an unknown flag
    is not a refusal. total_cost is None where get_total_cost is.
    """

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT r.id, c.last_name, c.first_name
            FROM reservations r
            JOIN clients c ON c.id = r.client_id
            WHERE r.free_included IS FALSE
            ORDER BY r.id
            """,
        )
        return [
            {
                "reservation_id": r[0],
                "last_name": r[1],
                "first_name": r[2],
                "total_cost": get_total_cost(r[0], cur=c),
            }
            for r in rows
        ]

    return _run(cur, _do)


def big_service_spenders(
    threshold: float = 100,
    *,
    cur: PgCursor | None = None,
) -> list[dict]:
    """Clients whose booked services cost more than threshold in total.

    Only reservations that hold rooms count. Unpriced services add nothing.
    """

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT c.id, c.last_name, c.first_name, SUM(s.price) AS total_price
            FROM clients c
            JOIN reservations r ON r.client_id = c.id
            JOIN reservation_services rs ON rs.reservation_id = r.id
            JOIN services s ON s.id = rs.service_id
            WHERE EXISTS (
                SELECT 1 FROM reservation_room_types rrt
                WHERE rrt.reservation_id = r.id
            )
            GROUP BY c.id
            HAVING SUM(s.price) > %s
            ORDER BY total_price DESC, c.id
            """,
            (threshold,),
        )
        return [
            {
                "client_id": r[0],
                "last_name": r[1],
                "first_name": r[2],
                "total_price": float(r[3]),
            }
            for r in rows
        ]

    return _run(cur, _do)


def clients_with_reservations(*, cur: PgCursor | None = None) -> list[dict]:
    """Every client with their reservation IDs, empty for clients without any."""

    def _do(c: PgCursor) -> list[dict]:
        rows = fetchall(
            c,
            """
            SELECT c.id, c.last_name, c.first_name, r.id
            FROM clients c
            LEFT JOIN reservations r ON r.client_id = c.id
            ORDER BY c.id, r.id
            """,
        )
        clients: dict[int, dict] = {}
        for client_id, last_name, first_name, reservation_id in rows:
            entry = clients.setdefault(
                client_id,
                {
                    "client_id": client_id,
                    "last_name": last_name,
                    "first_name": first_name,
                    "reservation_ids": [],
                },
            )
            if reservation_id is not None:
                entry["reservation_ids"].append(reservation_id)
        return list(clients.values())

    return _run(cur, _do)


def fill_missing_service_prices(
    *,
    default_price: float = DEFAULT_SERVICE_PRICE,
    basic_price: float = BASIC_SERVICE_PRICE,
    cur: PgCursor | None = None,
) -> int:
    """Price every service whose price is unset.

    Services some staff member offers as a basic duty get basic_price,
    the rest get default_price.

    Returns:
        Number of services updated.
    """

    def _do(c: PgCursor) -> int:
        c.execute(
            """
            UPDATE services s
            SET price = CASE
                WHEN EXISTS (
                    SELECT 1 FROM staff_services ss
                    WHERE ss.service_id = s.id AND ss.is_basic_service
                ) THEN %s
                ELSE %s
            END
            WHERE s.price IS NULL
            """,
            (basic_price, default_price),
        )
        updated = c.rowcount
        logger.info(
            "missing service prices filled",
            extra={"extra_fields": {"updated": updated}},
        )
        return updated

    return _run(cur, _do)
