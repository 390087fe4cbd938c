from typing import Callable, List
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ErrorKind
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.domain.entity.reservation_entity import ReservationView
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class ListEventReservationsUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @Logger.io
    async def list_event_reservations(
        self, *, event_id: UUID
    ) -> OperationResult[List[ReservationView]]:
        async with self.uow_factory() as uow:
            event = await uow.event_repo.get_by_id(event_id=event_id)

        if event is None:
            return OperationResult.failure(
                kind=ErrorKind.NOT_FOUND,
                message='Event not found.',
                reason=ErrorReason.EVENT_NOT_FOUND,
            )

        # Read from the aggregate itself, so the list always matches its capacity figures
        return OperationResult.success(list(event.reservations))
