"""
Event Repository Interface

Persists whole Event aggregates (reservations included). Every write carries the
version the aggregate was loaded with; a stale version fails at commit.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.service.event_reservation.domain.aggregate.event_aggregate import Event
from src.service.event_reservation.domain.enum.event_category import EventCategory


class IEventRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        """
        Load one event aggregate

        Returns:
            A private copy of the stored aggregate, or None if not found
        """
        pass

    @abstractmethod
    async def add(self, *, event: Event) -> None:
        """Stage a new event; fails at commit if the id already exists"""
        pass

    @abstractmethod
    async def update(self, *, event: Event) -> None:
        """Stage an update guarded by `event.version`"""
        pass

    @abstractmethod
    async def delete(self, *, event: Event) -> None:
        """Stage a delete guarded by `event.version`"""
        pass

    @abstractmethod
    async def search_upcoming(self, *, from_time: datetime) -> List[Event]:
        """Events starting at or after `from_time`, not cancelled, ordered by start"""
        pass

    @abstractmethod
    async def search_by_filter(
        self, *, city: Optional[str] = None, category: Optional[EventCategory] = None
    ) -> List[Event]:
        """
        Filter events that are not cancelled

        Args:
            city: Case-insensitive exact city match; None matches any city
            category: None matches any category

        Returns:
            Matching events ordered by start
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Event]:
        pass
