"""
Event Aggregate - Aggregate Root for capacity and reservations

[DDD Design Principles]
- Event is the Aggregate Root
- Reservation is an entity within the aggregate; outside code only sees ReservationView
- Every state change goes through update_details / cancel / reserve / cancel_reservation

[Business Invariants]
- remaining_capacity = capacity - seats of active reservations, never negative
- capacity is never set below the seats held by active reservations
- a cancelled event accepts no new reservations
"""

from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    CapacityExceededError,
    DomainError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types.entity_id import is_missing_id, new_entity_id
from src.service.event_reservation.domain.entity.reservation_entity import (
    Reservation,
    ReservationView,
)
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.event_category import EventCategory
from src.service.event_reservation.domain.value_object.location import Location


TITLE_MAX_LENGTH = 200
MAX_CAPACITY = 10_000
MIN_DURATION = timedelta(minutes=15)
START_GRACE_PERIOD = timedelta(minutes=5)


@attrs.frozen
class _EventDetails:
    title: str
    description: str
    start_at: datetime
    duration: timedelta
    location: Location
    capacity: int
    category: EventCategory


def _validate_details(
    *,
    title: Optional[str],
    description: Optional[str],
    start_at: datetime,
    duration: timedelta,
    location: Optional[Location],
    capacity: int,
    category: Any,
    now: datetime,
) -> _EventDetails:
    if not title or not title.strip():
        raise DomainError('Title is required.', ErrorReason.TITLE_REQUIRED)
    if len(title.strip()) > TITLE_MAX_LENGTH:
        raise DomainError(
            f'Title must be at most {TITLE_MAX_LENGTH} characters.', ErrorReason.TITLE_TOO_LONG
        )
    if not description or not description.strip():
        raise DomainError('Description is required.', ErrorReason.DESCRIPTION_REQUIRED)

    if not isinstance(start_at, datetime) or start_at.utcoffset() is None:
        raise DomainError('Start time must be timezone-aware.', ErrorReason.START_TIME_INVALID)
    if start_at < now - START_GRACE_PERIOD:
        raise DomainError('Start time cannot be in the past.', ErrorReason.START_IN_PAST)
    if duration < MIN_DURATION:
        raise DomainError('Duration must be at least 15 minutes.', ErrorReason.DURATION_TOO_SHORT)

    if location is None:
        raise DomainError('Location is required.', ErrorReason.CITY_REQUIRED)

    if capacity <= 0:
        raise DomainError('Capacity must be greater than zero.', ErrorReason.CAPACITY_NOT_POSITIVE)
    if capacity > MAX_CAPACITY:
        raise DomainError(
            f'Capacity must be at most {MAX_CAPACITY}.', ErrorReason.CAPACITY_TOO_LARGE
        )

    try:
        category = EventCategory(category)
    except ValueError:
        raise DomainError(f'Unknown category: {category}', ErrorReason.CATEGORY_INVALID) from None

    return _EventDetails(
        title=title.strip(),
        description=description.strip(),
        start_at=start_at,
        duration=duration,
        location=location,
        capacity=capacity,
        category=category,
    )


@attrs.define
class Event:
    id: UUID
    title: str
    description: str
    start_at: datetime
    duration: timedelta
    location: Location
    capacity: int
    category: EventCategory
    is_cancelled: bool = False
    created_at: Optional[datetime] = None
    # Optimistic concurrency token, owned by the repository
    version: int = 0
    _reservations: list[Reservation] = attrs.field(factory=list, repr=False)

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        title: str,
        description: str,
        start_at: datetime,
        duration: timedelta,
        location: Location,
        capacity: int,
        category: EventCategory,
        now: datetime,
    ) -> 'Event':
        details = _validate_details(
            title=title,
            description=description,
            start_at=start_at,
            duration=duration,
            location=location,
            capacity=capacity,
            category=category,
            now=now,
        )
        return cls(id=new_entity_id(), created_at=now, **attrs.asdict(details, recurse=False))

    @Logger.io
    def update_details(
        self,
        *,
        title: str,
        description: str,
        start_at: datetime,
        duration: timedelta,
        location: Location,
        capacity: int,
        category: EventCategory,
        now: datetime,
    ) -> None:
        """Validate everything first, then replace every field; nothing changes on failure"""
        details = _validate_details(
            title=title,
            description=description,
            start_at=start_at,
            duration=duration,
            location=location,
            capacity=capacity,
            category=category,
            now=now,
        )
        if details.capacity < self.reserved_seats:
            raise DomainError(
                'Capacity cannot be below existing reservations.',
                ErrorReason.CAPACITY_BELOW_RESERVED,
            )

        self.title = details.title
        self.description = details.description
        self.start_at = details.start_at
        self.duration = details.duration
        self.location = details.location
        self.capacity = details.capacity
        self.category = details.category

    @Logger.io
    def cancel(self) -> None:
        self.is_cancelled = True

    @Logger.io
    def reserve(self, *, user_id: UUID, quantity: int, now: datetime) -> ReservationView:
        if self.is_cancelled:
            raise DomainError(
                'Cannot reserve seats for a cancelled event.', ErrorReason.EVENT_CANCELLED
            )
        if is_missing_id(user_id):
            raise DomainError('User is required.', ErrorReason.INVALID_USER)
        if quantity <= 0:
            raise DomainError('Quantity must be greater than zero.', ErrorReason.INVALID_QUANTITY)
        if quantity > self.remaining_capacity:
            raise CapacityExceededError(
                'Not enough availability.', ErrorReason.CAPACITY_EXCEEDED
            )

        reservation = Reservation.create(
            event_id=self.id, user_id=user_id, quantity=quantity, now=now
        )
        self._reservations.append(reservation)
        return reservation.to_view()

    @Logger.io
    def cancel_reservation(self, *, reservation_id: UUID) -> ReservationView:
        reservation = self._find(reservation_id)
        if reservation is None:
            raise NotFoundError('Reservation not found.', ErrorReason.RESERVATION_NOT_FOUND)

        reservation.cancel()
        return reservation.to_view()

    @property
    def reserved_seats(self) -> int:
        return sum(r.quantity for r in self._reservations if not r.is_cancelled)

    @property
    def remaining_capacity(self) -> int:
        return self.capacity - self.reserved_seats

    @property
    def active_reservation_count(self) -> int:
        return sum(1 for r in self._reservations if not r.is_cancelled)

    @property
    def end_at(self) -> datetime:
        return self.start_at + self.duration

    @property
    def reservations(self) -> tuple[ReservationView, ...]:
        return tuple(r.to_view() for r in self._reservations)

    def find_reservation(self, reservation_id: UUID) -> Optional[ReservationView]:
        reservation = self._find(reservation_id)
        return reservation.to_view() if reservation else None

    def _find(self, reservation_id: UUID) -> Optional[Reservation]:
        return next((r for r in self._reservations if r.id == reservation_id), None)
