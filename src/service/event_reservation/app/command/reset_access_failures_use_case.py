from uuid import UUID

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.authenticated_user import AuthenticatedUser
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.lock_keys import user_lock_key
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class ResetAccessFailuresUseCase:
    def __init__(self, *, transaction: AggregateTransaction) -> None:
        self.transaction = transaction

    @Logger.io
    async def reset_access_failures(self, *, user_id: UUID) -> OperationResult[AuthenticatedUser]:
        """Administrative unlock: clears the failure counter and the lock together"""

        async def apply(uow: AbstractUnitOfWork) -> AuthenticatedUser:
            user = await uow.user_repo.get_by_id(user_id=user_id)
            if user is None:
                raise NotFoundError('User not found.', ErrorReason.USER_NOT_FOUND)

            user.reset_access_failures()
            await uow.user_repo.update(user=user)
            return AuthenticatedUser.from_entity(user)

        try:
            result = await self.transaction.run(lock_keys=[user_lock_key(user_id)], operation=apply)
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        Logger.base.info(f'🔓 [RESET_ACCESS] Access failures cleared for user {user_id}')
        return OperationResult.success(result)
