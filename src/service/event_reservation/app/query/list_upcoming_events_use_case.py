from typing import Callable, List

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_clock import IClock


class ListUpcomingEventsUseCase:
    """Events that have not started yet and are not cancelled, soonest first"""

    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork], clock: IClock) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @Logger.io
    async def list_upcoming_events(self) -> OperationResult[List[EventView]]:
        async with self.uow_factory() as uow:
            events = await uow.event_repo.search_upcoming(from_time=self.clock.now())

        return OperationResult.success([EventView.from_aggregate(e) for e in events])
