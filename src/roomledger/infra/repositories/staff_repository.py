"""Staff repository - staff members and the services they offer.

Uses raw SQL with psycopg2 (no ORM).
"""

from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from roomledger.domain.errors import ReferentialError, UniquenessError


def insert_staff(
    cur: PgCursor,
    *,
    specialization: str | None = None,
    description: str | None = None,
) -> dict:
    cur.execute(
        """
        INSERT INTO staff (specialization, description)
        VALUES (%s, %s)
        RETURNING id, specialization, description
        """,
        (specialization, description),
    )
    row = cur.fetchone()
    return {"id": row[0], "specialization": row[1], "description": row[2]}


def insert_staff_service(
    cur: PgCursor,
    *,
    staff_id: int,
    service_id: int,
    is_basic_service: bool | None = None,
) -> dict:
    """Record that a staff member offers a service.

    Raises:
        ReferentialError: If the staff member or service does not exist.
        UniquenessError: If the pair is already recorded.
    """
    try:
        cur.execute(
            """
            INSERT INTO staff_services (staff_id, service_id, is_basic_service)
            VALUES (%s, %s, %s)
            """,
            (staff_id, service_id, is_basic_service),
        )
    except pg_errors.UniqueViolation:
        raise UniquenessError("staff_service", (staff_id, service_id)) from None
    except pg_errors.ForeignKeyViolation as exc:
        constraint = getattr(exc.diag, "constraint_name", "") or ""
        if constraint.endswith("_service_id_fkey"):
            raise ReferentialError("service", service_id) from None
        raise ReferentialError("staff", staff_id) from None
    return {
        "staff_id": staff_id,
        "service_id": service_id,
        "is_basic_service": is_basic_service,
    }
