from datetime import datetime
from typing import List, Optional
from uuid import UUID

import anyio

from src.platform.database.in_memory_store import ChangeOp, InMemorySession, StagedChange
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.interface.i_reservation_repo import IReservationRepo
from src.service.event_reservation.domain.entity.reservation_entity import ReservationView


RESERVATION_TABLE = 'reservations'


def _booking_order(reservation: ReservationView) -> datetime:
    # Stable sort: equal timestamps keep insertion order
    return reservation.reserved_at


class ReservationRepoImpl(IReservationRepo):
    def __init__(self, *, session: InMemorySession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, reservation_id: UUID) -> Optional[ReservationView]:
        await anyio.lowlevel.checkpoint()
        record = self.session.store.get(table=RESERVATION_TABLE, key=reservation_id)
        return record.payload if record else None

    @Logger.io
    async def add(self, *, reservation: ReservationView) -> None:
        await anyio.lowlevel.checkpoint()
        self.session.stage(
            StagedChange(
                table=RESERVATION_TABLE,
                key=reservation.id,
                op=ChangeOp.INSERT,
                payload=reservation,
            )
        )

    @Logger.io
    async def update(self, *, reservation: ReservationView) -> None:
        await anyio.lowlevel.checkpoint()
        # Unversioned: views are only rewritten under the owning event's lock, in the
        # same batch as the versioned Event update
        self.session.stage(
            StagedChange(
                table=RESERVATION_TABLE,
                key=reservation.id,
                op=ChangeOp.UPDATE,
                payload=reservation,
            )
        )

    async def list_by_event(self, *, event_id: UUID) -> List[ReservationView]:
        return [r for r in await self.list_all() if r.event_id == event_id]

    async def list_by_user(self, *, user_id: UUID) -> List[ReservationView]:
        return [r for r in await self.list_all() if r.user_id == user_id]

    async def list_all(self) -> List[ReservationView]:
        await anyio.lowlevel.checkpoint()
        records = self.session.store.scan(table=RESERVATION_TABLE)
        return sorted((r.payload for r in records), key=_booking_order)
