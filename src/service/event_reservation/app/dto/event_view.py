from datetime import datetime, timedelta
from uuid import UUID

import attrs

from src.service.event_reservation.domain.aggregate.event_aggregate import Event
from src.service.event_reservation.domain.enum.event_category import EventCategory


@attrs.define(frozen=True)
class EventView:
    """Snapshot of an event for callers outside the aggregate; reservations excluded"""

    id: UUID
    title: str
    description: str
    start_at: datetime
    end_at: datetime
    duration: timedelta
    city: str
    address_line: str
    location: str
    capacity: int
    reserved_seats: int
    remaining_capacity: int
    active_reservation_count: int
    category: EventCategory
    is_cancelled: bool

    @classmethod
    def from_aggregate(cls, event: Event) -> 'EventView':
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            start_at=event.start_at,
            end_at=event.end_at,
            duration=event.duration,
            city=event.location.city,
            address_line=event.location.address_line,
            location=str(event.location),
            capacity=event.capacity,
            reserved_seats=event.reserved_seats,
            remaining_capacity=event.remaining_capacity,
            active_reservation_count=event.active_reservation_count,
            category=event.category,
            is_cancelled=event.is_cancelled,
        )
