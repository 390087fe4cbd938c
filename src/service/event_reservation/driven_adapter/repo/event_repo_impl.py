import copy
from datetime import datetime
from typing import List, Optional
from uuid import UUID

import anyio

from src.platform.database.in_memory_store import (
    ChangeOp,
    InMemorySession,
    StagedChange,
    StoredRecord,
)
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.interface.i_event_repo import IEventRepo
from src.service.event_reservation.domain.aggregate.event_aggregate import Event
from src.service.event_reservation.domain.enum.event_category import EventCategory


EVENT_TABLE = 'events'


def _record_to_aggregate(record: StoredRecord) -> Event:
    event: Event = record.payload
    event.version = record.version
    return event


class EventRepoImpl(IEventRepo):
    def __init__(self, *, session: InMemorySession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> Optional[Event]:
        await anyio.lowlevel.checkpoint()
        record = self.session.store.get(table=EVENT_TABLE, key=event_id)
        return _record_to_aggregate(record) if record else None

    @Logger.io
    async def add(self, *, event: Event) -> None:
        await anyio.lowlevel.checkpoint()
        self.session.stage(
            StagedChange(
                table=EVENT_TABLE, key=event.id, op=ChangeOp.INSERT, payload=copy.deepcopy(event)
            )
        )

    @Logger.io
    async def update(self, *, event: Event) -> None:
        await anyio.lowlevel.checkpoint()
        self.session.stage(
            StagedChange(
                table=EVENT_TABLE,
                key=event.id,
                op=ChangeOp.UPDATE,
                payload=copy.deepcopy(event),
                expected_version=event.version,
            )
        )

    @Logger.io
    async def delete(self, *, event: Event) -> None:
        await anyio.lowlevel.checkpoint()
        self.session.stage(
            StagedChange(
                table=EVENT_TABLE,
                key=event.id,
                op=ChangeOp.DELETE,
                expected_version=event.version,
            )
        )

    async def search_upcoming(self, *, from_time: datetime) -> List[Event]:
        events = await self.list_all()
        return sorted(
            (e for e in events if not e.is_cancelled and e.start_at >= from_time),
            key=lambda e: e.start_at,
        )

    async def search_by_filter(
        self, *, city: Optional[str] = None, category: Optional[EventCategory] = None
    ) -> List[Event]:
        wanted_city = city.strip().casefold() if city and city.strip() else None
        events = await self.list_all()
        return sorted(
            (
                e
                for e in events
                if not e.is_cancelled
                and (wanted_city is None or e.location.city.casefold() == wanted_city)
                and (category is None or e.category == category)
            ),
            key=lambda e: e.start_at,
        )

    async def list_all(self) -> List[Event]:
        await anyio.lowlevel.checkpoint()
        return [_record_to_aggregate(r) for r in self.session.store.scan(table=EVENT_TABLE)]
