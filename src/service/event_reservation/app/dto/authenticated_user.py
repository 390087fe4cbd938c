from uuid import UUID

import attrs

from src.service.event_reservation.domain.entity.user_entity import User
from src.service.event_reservation.domain.enum.user_account_state import UserAccountState
from src.service.event_reservation.domain.enum.user_role import UserRole


@attrs.define(frozen=True)
class AuthenticatedUser:
    id: UUID
    username: str
    email: str
    role: UserRole
    state: UserAccountState

    @classmethod
    def from_entity(cls, user: User) -> 'AuthenticatedUser':
        return cls(
            id=user.id,
            username=user.username,
            email=user.email.value,
            role=user.role,
            state=user.state,
        )
