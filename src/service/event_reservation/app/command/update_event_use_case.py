from datetime import datetime, timedelta
from uuid import UUID

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_clock import IClock
from src.service.event_reservation.app.lock_keys import event_lock_key
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.event_category import EventCategory
from src.service.event_reservation.domain.value_object.location import Location


class UpdateEventUseCase:
    def __init__(self, *, transaction: AggregateTransaction, clock: IClock) -> None:
        self.transaction = transaction
        self.clock = clock

    @Logger.io
    async def update_event(
        self,
        *,
        event_id: UUID,
        title: str,
        description: str,
        start_at: datetime,
        duration: timedelta,
        city: str,
        address_line: str,
        capacity: int,
        category: EventCategory,
    ) -> OperationResult[EventView]:
        """
        Replace every editable field of an event

        Capacity may not drop below the seats already held by active reservations;
        on any failure the stored event is left exactly as it was.
        """
        try:
            location = Location.create(city=city, address_line=address_line)

            async def apply(uow: AbstractUnitOfWork) -> EventView:
                event = await uow.event_repo.get_by_id(event_id=event_id)
                if event is None:
                    raise NotFoundError('Event not found.', ErrorReason.EVENT_NOT_FOUND)

                event.update_details(
                    title=title,
                    description=description,
                    start_at=start_at,
                    duration=duration,
                    location=location,
                    capacity=capacity,
                    category=category,
                    now=self.clock.now(),
                )
                await uow.event_repo.update(event=event)
                return EventView.from_aggregate(event)

            view = await self.transaction.run(lock_keys=[event_lock_key(event_id)], operation=apply)
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        Logger.base.info(f'✏️ [UPDATE_EVENT] Updated event {event_id}')
        return OperationResult.success(view)
