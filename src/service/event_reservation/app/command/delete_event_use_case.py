from uuid import UUID

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.lock_keys import event_lock_key
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class DeleteEventUseCase:
    def __init__(self, *, transaction: AggregateTransaction) -> None:
        self.transaction = transaction

    @Logger.io
    async def delete_event(self, *, event_id: UUID) -> OperationResult[None]:
        """
        Hard-delete an event

        Refused while the event still has active reservations: cancel the event
        (or its reservations) first. Reservation history of a deleted event stays
        in the reservation read model.
        """

        async def apply(uow: AbstractUnitOfWork) -> None:
            event = await uow.event_repo.get_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError('Event not found.', ErrorReason.EVENT_NOT_FOUND)
            if event.active_reservation_count:
                raise ConflictError(
                    'Event has active reservations.', ErrorReason.EVENT_HAS_ACTIVE_RESERVATIONS
                )

            await uow.event_repo.delete(event=event)

        try:
            await self.transaction.run(lock_keys=[event_lock_key(event_id)], operation=apply)
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        Logger.base.info(f'🗑️ [DELETE_EVENT] Event {event_id} deleted')
        return OperationResult.success()
