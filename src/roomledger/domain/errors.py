"""Error taxonomy for reservation consistency rules.

Every error aborts the transaction that raised it; txn() rolls back on exit.
"""

from __future__ import annotations


class ReservationError(Exception):
    """Base class for domain errors."""


class ReferentialError(ReservationError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} does not exist")


class ReservationNotFoundError(ReferentialError):
    """Raised when the reservation does not exist."""

    def __init__(self, reservation_id: object) -> None:
        super().__init__("reservation", reservation_id)


class OverbookingError(ReservationError):
    """Raised when a room amount exceeds the computed availability."""

    def __init__(self, room_type_id: int, requested: int, available: int) -> None:
        self.room_type_id = room_type_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Room type {room_type_id}: requested {requested} rooms, "
            f"only {available} available (short by {self.shortfall})"
        )

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class UniquenessError(ReservationError):
    """Raised on a duplicate passport number or identity."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Duplicate {field}")
