from typing import Callable, List
from uuid import UUID

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.domain.entity.reservation_entity import ReservationView


class ListUserReservationsUseCase:
    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @Logger.io
    async def list_user_reservations(
        self, *, user_id: UUID
    ) -> OperationResult[List[ReservationView]]:
        """Every reservation of the user, cancelled ones included, in booking order"""
        async with self.uow_factory() as uow:
            reservations = await uow.reservation_repo.list_by_user(user_id=user_id)

        return OperationResult.success(reservations)
