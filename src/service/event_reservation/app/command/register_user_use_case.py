from functools import partial
from typing import Optional

import anyio
from pydantic import SecretStr

from src.platform.config.core_setting import Settings
from src.platform.database.aggregate_transaction import AggregateTransaction
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, CustomBaseError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.dto.authenticated_user import AuthenticatedUser
from src.service.event_reservation.app.dto.operation_result import OperationResult
from src.service.event_reservation.app.interface.i_clock import IClock
from src.service.event_reservation.app.interface.i_password_hasher import (
    PASSWORD_MAX_BYTES,
    IPasswordHasher,
)
from src.service.event_reservation.app.lock_keys import email_lock_key, username_lock_key
from src.service.event_reservation.domain.entity.user_entity import User
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.user_role import UserRole
from src.service.event_reservation.domain.value_object.email_address import EmailAddress


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        transaction: AggregateTransaction,
        password_hasher: IPasswordHasher,
        clock: IClock,
        settings: Settings,
    ) -> None:
        self.transaction = transaction
        self.password_hasher = password_hasher
        self.clock = clock
        self.password_min_length = settings.PASSWORD_MIN_LENGTH

    @Logger.io
    async def register(
        self,
        *,
        username: str,
        email: str,
        password: str,
        role: Optional[UserRole] = None,
    ) -> OperationResult[AuthenticatedUser]:
        """
        Register a new account

        Username and email are unique case-insensitively. Both keys are locked for
        the duration, and the store re-checks them at commit.
        """
        try:
            if not username or not username.strip():
                raise DomainError('Username is required.', ErrorReason.USERNAME_REQUIRED)
            email_address = EmailAddress.create(email)
            self._validate_password(password)

            password_hash = await anyio.to_thread.run_sync(
                partial(self.password_hasher.hash_password, plain_password=SecretStr(password))
            )

            async def apply(uow: AbstractUnitOfWork) -> User:
                if await uow.user_repo.get_by_email(email=email_address.value):
                    raise ConflictError('Email is already registered.', ErrorReason.EMAIL_TAKEN)
                if await uow.user_repo.get_by_username(username=username):
                    raise ConflictError('Username is already taken.', ErrorReason.USERNAME_TAKEN)

                user = User.create(
                    username=username,
                    email=email_address,
                    password_hash=password_hash,
                    role=UserRole.USER if role is None else role,
                    now=self.clock.now(),
                )
                await uow.user_repo.add(user=user)
                return user

            user = await self.transaction.run(
                lock_keys=[username_lock_key(username), email_lock_key(email_address.value)],
                operation=apply,
            )
        except CustomBaseError as e:
            return OperationResult.from_error(e)

        Logger.base.info(f'👤 [REGISTER] Registered user {user.id} as {user.role}')
        return OperationResult.success(AuthenticatedUser.from_entity(user))

    def _validate_password(self, password: str) -> None:
        if not password or len(password) < self.password_min_length:
            raise DomainError(
                f'Password must be at least {self.password_min_length} characters.',
                ErrorReason.PASSWORD_TOO_SHORT,
            )
        if len(password.encode('utf-8')) > PASSWORD_MAX_BYTES:
            raise DomainError(
                f'Password must be at most {PASSWORD_MAX_BYTES} bytes.',
                ErrorReason.PASSWORD_TOO_LONG,
            )
