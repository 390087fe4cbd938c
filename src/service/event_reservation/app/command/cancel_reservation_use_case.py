from uuid import UUID

from opentelemetry import trace

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.lock_keys import event_lock_key
from src.service.event_reservation.domain.entity.reservation_entity import ReservationView
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class CancelReservationUseCase:
    """
    Cancel a reservation through its owning Event

    The read model only tells us which event to lock; the cancellation itself is
    applied to the Event aggregate and the view is rewritten in the same commit.
    Cancelling twice succeeds and changes nothing.
    """

    def __init__(self, *, transaction: AggregateTransaction) -> None:
        self.transaction = transaction
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def cancel_reservation(self, *, reservation_id: UUID) -> OperationResult[ReservationView]:
        with self.tracer.start_as_current_span(
            'use_case.cancel_reservation',
            attributes={'reservation.id': str(reservation_id)},
        ):
            try:
                async with self.transaction.uow_factory() as uow:
                    known = await uow.reservation_repo.get_by_id(reservation_id=reservation_id)
                if known is None:
                    raise NotFoundError('Reservation not found.', ErrorReason.RESERVATION_NOT_FOUND)

                async def apply(uow: AbstractUnitOfWork) -> ReservationView:
                    event = await uow.event_repo.get_by_id(event_id=known.event_id)
                    if event is None:
                        raise NotFoundError(
                            'Reservation not found.', ErrorReason.RESERVATION_NOT_FOUND
                        )

                    reservation = event.cancel_reservation(reservation_id=reservation_id)
                    await uow.event_repo.update(event=event)
                    await uow.reservation_repo.update(reservation=reservation)
                    return reservation

                reservation = await self.transaction.run(
                    lock_keys=[event_lock_key(known.event_id)], operation=apply
                )
            except CustomBaseError as e:
                return OperationResult.from_error(e)

            Logger.base.info(
                f'↩️ [CANCEL_RESERVATION] Reservation {reservation_id} cancelled, '
                f'{reservation.quantity} seat(s) released on event {reservation.event_id}'
            )
            return OperationResult.success(reservation)
