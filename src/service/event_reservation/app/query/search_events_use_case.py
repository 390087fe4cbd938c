from typing import Callable, List, Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ErrorKind
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.event_category import EventCategory


class SearchEventsUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @Logger.io
    async def search_events(
        self, *, city: Optional[str] = None, category: Optional[str] = None
    ) -> OperationResult[List[EventView]]:
        """
        Search events that are not cancelled

        Args:
            city: Matched case-insensitively; blank or None matches every city
            category: EventCategory value; None matches every category

        Returns:
            Matching events ordered by start time
        """
        wanted_category = None
        if category is not None:
            try:
                wanted_category = EventCategory(category)
            except ValueError:
                return OperationResult.failure(
                    kind=ErrorKind.VALIDATION,
                    message=f'Unknown category: {category}',
                    reason=ErrorReason.CATEGORY_INVALID,
                )

        async with self.uow_factory() as uow:
            events = await uow.event_repo.search_by_filter(city=city, category=wanted_category)

        Logger.base.info(f'🔍 [SEARCH_EVENTS] city={city} category={category}: {len(events)} hits')
        return OperationResult.success([EventView.from_aggregate(e) for e in events])
