from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.platform.types.entity_id import new_entity_id
from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.user_account_state import UserAccountState
from src.service.event_reservation.domain.enum.user_role import UserRole
from src.service.event_reservation.domain.value_object.email_address import EmailAddress


LOCKOUT_THRESHOLD = 5


def _validate_role(role: Any) -> UserRole:
    if role is None or (isinstance(role, str) and not role.strip()):
        raise DomainError('Role is required.', ErrorReason.ROLE_REQUIRED)
    try:
        return UserRole(role)
    except ValueError:
        valid_roles = ', '.join(r.value for r in UserRole)
        raise DomainError(
            f'Invalid role: {role}. Must be one of: {valid_roles}', ErrorReason.ROLE_INVALID
        ) from None


@attrs.define
class User:
    """
    Authentication state of one account

    The account is locked exactly when `access_failed_count` has reached
    LOCKOUT_THRESHOLD since the last reset. The counter keeps counting while locked.
    """

    id: UUID
    username: str
    email: EmailAddress
    password_hash: str = attrs.field(repr=False)  # Hide from repr for security
    role: UserRole = UserRole.USER
    access_failed_count: int = 0
    is_locked: bool = False
    created_at: Optional[datetime] = None
    # Optimistic concurrency token, owned by the repository
    version: int = 0

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        username: str,
        email: EmailAddress,
        password_hash: str,
        role: UserRole = UserRole.USER,
        now: Optional[datetime] = None,
    ) -> 'User':
        if not username or not username.strip():
            raise DomainError('Username is required.', ErrorReason.USERNAME_REQUIRED)
        if not password_hash or not password_hash.strip():
            raise DomainError('Password hash is required.', ErrorReason.PASSWORD_HASH_REQUIRED)

        return cls(
            id=new_entity_id(),
            username=username.strip(),
            email=email,
            password_hash=password_hash,
            role=_validate_role(role),
            created_at=now,
        )

    @property
    def state(self) -> UserAccountState:
        return UserAccountState.LOCKED if self.is_locked else UserAccountState.ACTIVE

    @Logger.io
    def register_access_failure(self) -> None:
        self.access_failed_count += 1
        if self.access_failed_count >= LOCKOUT_THRESHOLD and not self.is_locked:
            self.is_locked = True
            Logger.base.warning(
                f'[LOCKOUT] User {self.id} locked after {self.access_failed_count} failed attempts'
            )

    @Logger.io
    def reset_access_failures(self) -> None:
        self.access_failed_count = 0
        self.is_locked = False

    def set_password_hash(self, password_hash: str) -> None:
        if not password_hash or not password_hash.strip():
            raise DomainError('Password hash is required.', ErrorReason.PASSWORD_HASH_REQUIRED)
        self.password_hash = password_hash

    def set_role(self, role: UserRole) -> None:
        self.role = _validate_role(role)
