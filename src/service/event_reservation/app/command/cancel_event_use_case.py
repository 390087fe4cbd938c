from uuid import UUID

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.lock_keys import event_lock_key
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class CancelEventUseCase:
    """Cancelling stops new reservations; existing ones stay as they are."""

    def __init__(self, *, transaction: AggregateTransaction) -> None:
        self.transaction = transaction

    @Logger.io
    async def cancel_event(self, *, event_id: UUID) -> OperationResult[EventView]:
        async def apply(uow: AbstractUnitOfWork) -> EventView:
            event = await uow.event_repo.get_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError('Event not found.', ErrorReason.EVENT_NOT_FOUND)

            event.cancel()
            await uow.event_repo.update(event=event)
            return EventView.from_aggregate(event)

        try:
            view = await self.transaction.run(lock_keys=[event_lock_key(event_id)], operation=apply)
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        Logger.base.info(f'🚫 [CANCEL_EVENT] Event {event_id} cancelled')
        return OperationResult.success(view)
