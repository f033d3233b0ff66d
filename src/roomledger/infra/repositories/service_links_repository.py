"""Reservation service links - which services a reservation includes.

Uses raw SQL with psycopg2 (no ORM).
Presence of a row means the service is included; there is no quantity.
"""

from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReferentialError


def insert_free_service_links(cur: PgCursor, reservation_id: int) -> list[int]:
    """Link every zero-priced service to a reservation.

    Uses ON CONFLICT DO NOTHING so services already linked are skipped.

    Args:
        cur: Database cursor (within transaction).
        reservation_id: Reservation identifier.

    Returns:
        IDs of the services newly linked, ascending.
    """
    cur.execute(
        """
        INSERT INTO reservation_services (reservation_id, service_id)
        SELECT %s, s.id FROM services s
        WHERE s.price = 0
        ORDER BY s.id
        ON CONFLICT (reservation_id, service_id) DO NOTHING
        RETURNING service_id
        """,
        (reservation_id,),
    )
    return sorted(row[0] for row in cur.fetchall())


def add_service_link(cur: PgCursor, *, reservation_id: int, service_id: int) -> bool:
    """Link one service to a reservation.

    Returns:
        True if newly linked, False if it was already linked.

    Raises:
        ReferentialError: If the service or reservation does not exist.
    """
    try:
        cur.execute(
            """
            INSERT INTO reservation_services (reservation_id, service_id)
            VALUES (%s, %s)
            ON CONFLICT (reservation_id, service_id) DO NOTHING
            RETURNING service_id
            """,
            (reservation_id, service_id),
        )
    except pg_errors.ForeignKeyViolation as exc:
        constraint = getattr(exc.diag, "constraint_name", "") or ""
        if constraint.endswith("_service_id_fkey"):
            raise ReferentialError("service", service_id) from None
        raise ReferentialError("reservation", reservation_id) from None
    return cur.fetchone() is not None


def delete_service_link(cur: PgCursor, *, reservation_id: int, service_id: int) -> bool:
    cur.execute(
        """
        DELETE FROM reservation_services
        WHERE reservation_id = %s AND service_id = %s
        """,
        (reservation_id, service_id),
    )
    return cur.rowcount == 1


def delete_service_links_for_reservation(cur: PgCursor, reservation_id: int) -> int:
    """Delete every service link of a reservation. Returns the number removed."""
    cur.execute(
        "DELETE FROM reservation_services WHERE reservation_id = %s",
        (reservation_id,),
    )
    return cur.rowcount


def list_service_ids(cur: PgCursor, reservation_id: int) -> list[int]:
    cur.execute(
        """
        SELECT service_id FROM reservation_services
        WHERE reservation_id = %s
        ORDER BY service_id
        """,
        (reservation_id,),
    )
    return [row[0] for row in cur.fetchall()]
