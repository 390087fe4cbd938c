from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.command.login_use_case import find_user_by_login
from src.service.event_reservation.app.dto.authenticated_user import AuthenticatedUser
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.lock_keys import user_lock_key
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


class RegisterFailedAttemptUseCase:
    """Count one failed login for an account, e.g. reported by an external auth flow"""

    def __init__(self, *, transaction: AggregateTransaction) -> None:
        self.transaction = transaction

    @Logger.io
    async def register_failed_attempt(
        self, *, username_or_email: str
    ) -> OperationResult[AuthenticatedUser]:
        try:
            if not username_or_email or not username_or_email.strip():
                raise DomainError(
                    'Username or email is required.', ErrorReason.CREDENTIALS_REQUIRED
                )

            async with self.transaction.uow_factory() as uow:
                user = await find_user_by_login(
                    user_repo=uow.user_repo, username_or_email=username_or_email
                )
            if user is None:
                raise NotFoundError('User not found.', ErrorReason.USER_NOT_FOUND)
            user_id = user.id

            async def apply(uow: AbstractUnitOfWork) -> AuthenticatedUser:
                current = await uow.user_repo.get_by_id(user_id=user_id)
                if current is None:
                    raise NotFoundError('User not found.', ErrorReason.USER_NOT_FOUND)

                current.register_access_failure()
                await uow.user_repo.update(user=current)
                return AuthenticatedUser.from_entity(current)

            result = await self.transaction.run(lock_keys=[user_lock_key(user_id)], operation=apply)
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        return OperationResult.success(result)
