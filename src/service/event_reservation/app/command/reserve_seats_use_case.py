from uuid import UUID

from opentelemetry import trace

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.types.entity_id import is_missing_id
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_clock import IClock
from src.service.event_reservation.app.lock_keys import event_lock_key
from src.service.event_reservation.domain.entity.reservation_entity import ReservationView
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class ReserveSeatsUseCase:
    """
    Reserve seats on one event

    Flow (inside the event lock and one unit of work):
    1. Load the Event aggregate (EVENT_NOT_FOUND)
    2. Check the user exists (USER_NOT_FOUND)
    3. Event.reserve - cancelled event, bad quantity, not enough seats
    4. Stage the event update and the new reservation view, commit both together

    A lost version race is retried by the transaction; CAPACITY_EXCEEDED is a normal
    business outcome and is never retried.
    """

    def __init__(self, *, transaction: AggregateTransaction, clock: IClock) -> None:
        self.transaction = transaction
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def reserve(
        self, *, event_id: UUID, user_id: UUID, quantity: int
    ) -> OperationResult[ReservationView]:
        with self.tracer.start_as_current_span(
            'use_case.reserve_seats',
            attributes={
                'event.id': str(event_id),
                'reservation.quantity': quantity,
            },
        ):

            async def apply(uow: AbstractUnitOfWork) -> ReservationView:
                event = await uow.event_repo.get_by_id(event_id=event_id)
                if event is None:
                    raise NotFoundError('Event not found.', ErrorReason.EVENT_NOT_FOUND)
                if not is_missing_id(user_id) and not await uow.user_repo.get_by_id(
                    user_id=user_id
                ):
                    raise NotFoundError('User not found.', ErrorReason.USER_NOT_FOUND)

                reservation = event.reserve(
                    user_id=user_id, quantity=quantity, now=self.clock.now()
                )
                await uow.event_repo.update(event=event)
                await uow.reservation_repo.add(reservation=reservation)
                return reservation

            try:
                reservation = await self.transaction.run(
                    lock_keys=[event_lock_key(event_id)], operation=apply
                )
            except CustomBaseError as e:
                Logger.base.info(
                    f'⛔ [RESERVE] Event {event_id} refused {quantity}: {e.reason or e.kind}'
                )
                return OperationResult.from_error(e)

            Logger.base.info(
                f'🎟️ [RESERVE] Reservation {reservation.id}: {quantity} seats on event {event_id}'
            )
            return OperationResult.success(reservation)
