"""
Reservation Repository Interface

Read model of reservations across events. It stores ReservationView projections
and is written in the same unit of work as the owning Event, so both always agree.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.event_reservation.domain.entity.reservation_entity import ReservationView


class IReservationRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, reservation_id: UUID) -> Optional[ReservationView]:
        pass

    @abstractmethod
    async def add(self, *, reservation: ReservationView) -> None:
        pass

    @abstractmethod
    async def update(self, *, reservation: ReservationView) -> None:
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: UUID) -> List[ReservationView]:
        """Reservations of one event in booking order"""
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: UUID) -> List[ReservationView]:
        """Reservations of one user in booking order"""
        pass

    @abstractmethod
    async def list_all(self) -> List[ReservationView]:
        pass
