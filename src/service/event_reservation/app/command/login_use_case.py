from functools import partial
from typing import Optional

import anyio
import attrs
from pydantic import SecretStr

from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    AuthenticationError,
    CustomBaseError,
    DomainError,
    ErrorKind,
    LockedAccountError,
)
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.authenticated_user import AuthenticatedUser
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_password_hasher import IPasswordHasher
from src.service.event_reservation.app.interface.i_user_repo import IUserRepo
from src.service.event_reservation.app.lock_keys import user_lock_key
from src.service.event_reservation.domain.entity.user_entity import User
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


INVALID_CREDENTIALS_MESSAGE = 'Invalid credentials.'
ACCOUNT_LOCKED_MESSAGE = 'Account is locked due to failed attempts.'


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


async def find_user_by_login(*, user_repo: IUserRepo, username_or_email: str) -> Optional[User]:
    """Usernames are tried first, then email addresses"""
    user = await user_repo.get_by_username(username=username_or_email)
    if user is None and '@' in username_or_email:
        user = await user_repo.get_by_email(email=username_or_email)
    return user


@attrs.define(frozen=True)
class _LoginAttempt:
    user: User
    authenticated: bool


class LoginUseCase:
    """
    Password login with account lockout

    Every step runs under the user's lock, so concurrent wrong passwords are each
    counted. A locked account is refused before the password is checked and its
    counter is left alone. Unknown users and wrong passwords get the same message.
    """

    def __init__(
        self, *, transaction: AggregateTransaction, password_hasher: IPasswordHasher
    ) -> None:
        self.transaction = transaction
        self.password_hasher = password_hasher

    @Logger.io
    async def login(
        self, *, username_or_email: str, password: str
    ) -> OperationResult[AuthenticatedUser]:
        try:
            if _is_blank(username_or_email) or _is_blank(password):
                raise DomainError(
                    'Username or email and password are required.',
                    ErrorReason.CREDENTIALS_REQUIRED,
                )

            async with self.transaction.uow_factory() as uow:
                user = await find_user_by_login(
                    user_repo=uow.user_repo, username_or_email=username_or_email
                )
            if user is None:
                raise AuthenticationError(
                    INVALID_CREDENTIALS_MESSAGE, ErrorReason.INVALID_CREDENTIALS
                )
            user_id = user.id

            async def apply(uow: AbstractUnitOfWork) -> _LoginAttempt:
                current = await uow.user_repo.get_by_id(user_id=user_id)
                if current is None:
                    raise AuthenticationError(
                        INVALID_CREDENTIALS_MESSAGE, ErrorReason.INVALID_CREDENTIALS
                    )
                if current.is_locked:
                    raise LockedAccountError(ACCOUNT_LOCKED_MESSAGE, ErrorReason.ACCOUNT_LOCKED)

                authenticated = await anyio.to_thread.run_sync(
                    partial(
                        self.password_hasher.verify_password,
                        plain_password=SecretStr(password),
                        hashed_password=current.password_hash,
                    )
                )
                if authenticated:
                    if current.access_failed_count:
                        current.reset_access_failures()
                        await uow.user_repo.update(user=current)
                else:
                    current.register_access_failure()
                    await uow.user_repo.update(user=current)
                return _LoginAttempt(user=current, authenticated=authenticated)

            attempt = await self.transaction.run(
                lock_keys=[user_lock_key(user_id)], operation=apply
            )
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        if not attempt.authenticated:
            Logger.base.warning(
                f'🔑 [LOGIN] Wrong password for user {user_id} '
                f'({attempt.user.access_failed_count} failed attempt(s))'
            )
            return OperationResult.failure(
                kind=ErrorKind.AUTHENTICATION,
                message=INVALID_CREDENTIALS_MESSAGE,
                reason=ErrorReason.INVALID_CREDENTIALS,
            )

        Logger.base.info(f'🔓 [LOGIN] User {user_id} logged in')
        return OperationResult.success(AuthenticatedUser.from_entity(attempt.user))
