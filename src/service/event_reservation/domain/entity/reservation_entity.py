from datetime import datetime
from uuid import UUID

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.types.entity_id import is_missing_id, new_entity_id
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


@attrs.frozen
class ReservationView:
    """Read-only projection of a reservation, safe to hand outside the Event aggregate"""

    id: UUID
    event_id: UUID
    user_id: UUID
    quantity: int
    reserved_at: datetime
    is_cancelled: bool = False


@attrs.define
class Reservation:
    """
    Child entity of the Event aggregate

    Only `is_cancelled` changes after creation, and only through the owning Event.
    Reservations are soft-cancelled, never removed.
    """

    id: UUID
    event_id: UUID
    user_id: UUID
    quantity: int
    reserved_at: datetime
    is_cancelled: bool = False

    @classmethod
    def create(
        cls, *, event_id: UUID, user_id: UUID, quantity: int, now: datetime
    ) -> 'Reservation':
        if is_missing_id(event_id):
            raise DomainError('Event is required.', ErrorReason.INVALID_EVENT)
        if is_missing_id(user_id):
            raise DomainError('User is required.', ErrorReason.INVALID_USER)
        if quantity <= 0:
            raise DomainError('Quantity must be greater than zero.', ErrorReason.INVALID_QUANTITY)

        return cls(
            id=new_entity_id(),
            event_id=event_id,
            user_id=user_id,
            quantity=quantity,
            reserved_at=now,
        )

    def cancel(self) -> None:
        self.is_cancelled = True

    def to_view(self) -> ReservationView:
        return ReservationView(
            id=self.id,
            event_id=self.event_id,
            user_id=self.user_id,
            quantity=self.quantity,
            reserved_at=self.reserved_at,
            is_cancelled=self.is_cancelled,
        )
