from datetime import datetime, timedelta

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.event_view import EventView
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_clock import IClock
from src.service.event_reservation.app.lock_keys import event_lock_key
from src.service.event_reservation.domain.aggregate.event_aggregate import Event
from src.service.event_reservation.domain.enum.event_category import EventCategory
from src.service.event_reservation.domain.value_object.location import Location


class CreateEventUseCase:
    def __init__(self, *, transaction: AggregateTransaction, clock: IClock) -> None:
        self.transaction = transaction
        self.clock = clock

    @Logger.io
    async def create_event(
        self,
        *,
        title: str,
        description: str,
        start_at: datetime,
        duration: timedelta,
        city: str,
        address_line: str,
        capacity: int,
        category: EventCategory,
    ) -> OperationResult[EventView]:
        try:
            event = Event.create(
                title=title,
                description=description,
                start_at=start_at,
                duration=duration,
                location=Location.create(city=city, address_line=address_line),
                capacity=capacity,
                category=category,
                now=self.clock.now(),
            )

            async def persist(uow: AbstractUnitOfWork) -> EventView:
                await uow.event_repo.add(event=event)
                return EventView.from_aggregate(event)

            view = await self.transaction.run(
                lock_keys=[event_lock_key(event.id)], operation=persist
            )
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        Logger.base.info(f'🎫 [CREATE_EVENT] Created event {view.id} ({view.capacity} seats)')
        return OperationResult.success(view)
