import copy
from typing import Optional
from uuid import UUID

import anyio

from src.platform.database.in_memory_store import (
    ChangeOp,
    InMemorySession,
    StagedChange,
    StoredRecord,
    UniqueIndex,
)
from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.interface.i_user_repo import IUserRepo
from src.service.event_reservation.domain.entity.user_entity import User
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


USER_TABLE = 'users'

USER_UNIQUE_INDEXES = (
    UniqueIndex(
        table=USER_TABLE,
        key_of=lambda user: user.username.casefold(),
        message='Username is already taken.',
        reason=ErrorReason.USERNAME_TAKEN,
    ),
    UniqueIndex(
        table=USER_TABLE,
        key_of=lambda user: user.email.normalized,
        message='Email is already registered.',
        reason=ErrorReason.EMAIL_TAKEN,
    ),
)


def _record_to_entity(record: StoredRecord) -> User:
    user: User = record.payload
    user.version = record.version
    return user


class UserRepoImpl(IUserRepo):
    def __init__(self, *, session: InMemorySession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, user_id: UUID) -> Optional[User]:
        await anyio.lowlevel.checkpoint()
        record = self.session.store.get(table=USER_TABLE, key=user_id)
        return _record_to_entity(record) if record else None

    @Logger.io
    async def get_by_email(self, *, email: str) -> Optional[User]:
        wanted = email.strip().casefold()
        return await self._find_first(lambda user: user.email.normalized == wanted)

    @Logger.io
    async def get_by_username(self, *, username: str) -> Optional[User]:
        wanted = username.strip().casefold()
        return await self._find_first(lambda user: user.username.casefold() == wanted)

    @Logger.io
    async def add(self, *, user: User) -> None:
        await anyio.lowlevel.checkpoint()
        self.session.stage(
            StagedChange(
                table=USER_TABLE, key=user.id, op=ChangeOp.INSERT, payload=copy.deepcopy(user)
            )
        )

    @Logger.io
    async def update(self, *, user: User) -> None:
        await anyio.lowlevel.checkpoint()
        self.session.stage(
            StagedChange(
                table=USER_TABLE,
                key=user.id,
                op=ChangeOp.UPDATE,
                payload=copy.deepcopy(user),
                expected_version=user.version,
            )
        )

    async def _find_first(self, predicate) -> Optional[User]:
        await anyio.lowlevel.checkpoint()
        for record in self.session.store.scan(table=USER_TABLE):
            if predicate(record.payload):
                return _record_to_entity(record)
        return None
