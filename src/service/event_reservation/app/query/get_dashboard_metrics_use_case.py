from typing import Callable

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.dashboard_metrics import DashboardMetrics
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_clock import IClock


class GetDashboardMetricsUseCase:
    """Admin overview counts; a point-in-time read, not a consistent snapshot across tables"""

    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork], clock: IClock) -> None:
        self.uow_factory = uow_factory
        self.clock = clock

    @Logger.io
    async def get_dashboard_metrics(self) -> OperationResult[DashboardMetrics]:
        now = self.clock.now()
        async with self.uow_factory() as uow:
            events = await uow.event_repo.list_all()
            reservations = await uow.reservation_repo.list_all()

        active = [r for r in reservations if not r.is_cancelled]
        metrics = DashboardMetrics(
            total_events=len(events),
            upcoming_events=sum(1 for e in events if not e.is_cancelled and e.start_at >= now),
            cancelled_events=sum(1 for e in events if e.is_cancelled),
            total_reservations=len(reservations),
            active_reservations=len(active),
            cancelled_reservations=len(reservations) - len(active),
            reserved_seats=sum(r.quantity for r in active),
        )
        return OperationResult.success(metrics)
