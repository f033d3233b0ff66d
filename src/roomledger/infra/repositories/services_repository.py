"""Services repository - billable and complimentary hotel services.

Uses raw SQL with psycopg2 (no ORM).
A NULL price means "not set yet"; a price of exactly 0 means free.
"""

from psycopg2.extensions import cursor as PgCursor


def _price(value) -> float | None:
    return float(value) if value is not None else None


def insert_service(cur: PgCursor, *, name: str, price: float | None = None) -> dict:
    cur.execute(
        """
        INSERT INTO services (name, price)
        VALUES (%s, %s)
        RETURNING id, name, price
        """,
        (name, price),
    )
    row = cur.fetchone()
    return {"id": row[0], "name": row[1], "price": _price(row[2])}


def get_service(cur: PgCursor, service_id: int) -> dict | None:
    cur.execute(
        "SELECT id, name, price FROM services WHERE id = %s",
        (service_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return {"id": row[0], "name": row[1], "price": _price(row[2])}


def update_service_price(cur: PgCursor, service_id: int, price: float | None) -> bool:
    """Set a service price. Returns False if the service does not exist."""
    cur.execute(
        "UPDATE services SET price = %s WHERE id = %s",
        (price, service_id),
    )
    return cur.rowcount == 1


def list_free_services(cur: PgCursor) -> list[dict]:
    """Services whose price is exactly zero, ordered by ID."""
    cur.execute("SELECT id, name FROM services WHERE price = 0 ORDER BY id")
    return [{"id": row[0], "name": row[1]} for row in cur.fetchall()]
