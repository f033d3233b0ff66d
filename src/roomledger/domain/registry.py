"""Plain entity store operations: clients, staff, services, room types.

No derived rules apply here beyond uniqueness and referential integrity,
which the database enforces and the repositories translate into
UniquenessError and ReferentialError.
"""

from __future__ import annotations

import logging

from roomledger.domain.errors import ReferentialError
from roomledger.infra.db import txn
from roomledger.infra.repositories.clients_repository import (
    get_client,
    insert_client,
    update_trusted,
)
from roomledger.infra.repositories.room_types_repository import (
    get_room_type,
    insert_room_type,
)
from roomledger.infra.repositories.services_repository import (
    get_service,
    insert_service,
    update_service_price,
)
from roomledger.infra.repositories.staff_repository import (
    insert_staff,
    insert_staff_service,
)
from roomledger.observability.redaction import safe_log_context

logger = logging.getLogger(__name__)


def register_client(
    *,
    last_name: str,
    first_name: str,
    passport_number: str,
    phone: str | None = None,
    is_trusted: bool | None = None,
) -> dict:
    """Register a client.

    Raises:
        UniquenessError: If the passport number is already registered.
    """
    with txn() as c:
        client = insert_client(
            c,
            last_name=last_name,
            first_name=first_name,
            passport_number=passport_number,
            phone=phone,
            is_trusted=is_trusted,
        )
    logger.info(
        "client registered",
        extra={
            "extra_fields": safe_log_context(
                client_id=client["id"],
                phone=phone,
                passport_number=passport_number,
            ),
        },
    )
    return client


def find_client(client_id: int) -> dict | None:
    with txn() as c:
        return get_client(c, client_id)


def set_client_trusted(client_id: int, is_trusted: bool | None) -> None:
    """Mark a client trusted, untrusted or unknown (None).

    Raises:
        ReferentialError: If the client does not exist.
    """
    with txn() as c:
        if not update_trusted(c, client_id, is_trusted):
            raise ReferentialError("client", client_id)


def add_staff(*, specialization: str | None = None, description: str | None = None) -> dict:
    with txn() as c:
        return insert_staff(c, specialization=specialization, description=description)


def add_service(*, name: str, price: float | None = None) -> dict:
    """Create a service. price=None leaves it unset; price=0 makes it free."""
    if price is not None and price < 0:
        raise ValueError("price must be >= 0")
    with txn() as c:
        return insert_service(c, name=name, price=price)


def find_service(service_id: int) -> dict | None:
    with txn() as c:
        return get_service(c, service_id)


def set_service_price(service_id: int, price: float | None) -> None:
    """Change a service price.

    Already granted free services stay linked when the price changes.

    Raises:
        ReferentialError: If the service does not exist.
    """
    if price is not None and price < 0:
        raise ValueError("price must be >= 0")
    with txn() as c:
        if not update_service_price(c, service_id, price):
            raise ReferentialError("service", service_id)


def assign_staff_service(
    staff_id: int,
    service_id: int,
    *,
    is_basic_service: bool | None = None,
) -> dict:
    """Record that a staff member offers a service.

    Raises:
        ReferentialError: If the staff member or service does not exist.
        UniquenessError: If the pair is already recorded.
    """
    with txn() as c:
        return insert_staff_service(
            c,
            staff_id=staff_id,
            service_id=service_id,
            is_basic_service=is_basic_service,
        )


def add_room_type(
    *,
    name: str,
    price: float | None = None,
    capacity: int | None = None,
    is_vip: bool | None = None,
    number_of_rooms: int | None = None,
    description: str | None = None,
) -> dict:
    """Create a room type. number_of_rooms=None leaves the inventory unmanaged."""
    if number_of_rooms is not None and number_of_rooms < 0:
        raise ValueError("number_of_rooms must be >= 0")
    with txn() as c:
        return insert_room_type(
            c,
            name=name,
            price=price,
            capacity=capacity,
            is_vip=is_vip,
            number_of_rooms=number_of_rooms,
            description=description,
        )


def find_room_type(room_type_id: int) -> dict | None:
    with txn() as c:
        return get_room_type(c, room_type_id)
