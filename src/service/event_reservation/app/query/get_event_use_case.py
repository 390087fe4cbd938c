from typing import Callable
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.exception.exceptions import ErrorKind
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class GetEventUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @Logger.io
    async def get_event(self, *, event_id: UUID) -> OperationResult[EventView]:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.get_by_id(event_id=event_id)

        if event is None:
            Logger.base.warning(f'⚠️ [GET_EVENT] Event {event_id} not found')
            return OperationResult.failure(
                kind=ErrorKind.NOT_FOUND,
                message='Event not found.',
                reason=ErrorReason.EVENT_NOT_FOUND,
            )

        return OperationResult.success(EventView.from_aggregate(event))
