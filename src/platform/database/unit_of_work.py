"""
Unit of Work Pattern - one session and its repositories per operation

Architecture:
- UoW owns the session lifecycle
- UoW owns commit/rollback; commit applies every staged change or none
- Repositories share the UoW session
- Use cases coordinate several repositories through one UoW
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from src.platform.database.in_memory_store import InMemoryDataStore, InMemorySession
from src.platform.exception.exceptions import CustomBaseError, InfrastructureError
from src.platform.logging.loguru_io import Logger


if TYPE_CHECKING:
    from src.service.event_reservation.app.interface.i_event_repo import IEventRepo
    from src.service.event_reservation.app.interface.i_reservation_repo import (
        IReservationRepo,
    )
    from src.service.event_reservation.app.interface.i_user_repo import IUserRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work

    Usage:
        async with uow:
            event = await uow.event_repo.get_by_id(event_id=...)
            await uow.event_repo.update(event=event)
            await uow.commit()

    Leaving the block without commit discards everything staged.
    """

    event_repo: IEventRepo
    reservation_repo: IReservationRepo
    user_repo: IUserRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self) -> int:
        """Commit the transaction and return the number of persisted changes"""
        return await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, store: InMemoryDataStore):
        self.store = store
        self.session = InMemorySession(store=store)

    async def __aenter__(self):
        from src.service.event_reservation.driven_adapter.repo.event_repo_impl import (
            EventRepoImpl,
        )
        from src.service.event_reservation.driven_adapter.repo.reservation_repo_impl import (
            ReservationRepoImpl,
        )
        from src.service.event_reservation.driven_adapter.repo.user_repo_impl import UserRepoImpl

        self.session = InMemorySession(store=self.store)
        self.event_repo = EventRepoImpl(session=self.session)
        self.reservation_repo = ReservationRepoImpl(session=self.session)
        self.user_repo = UserRepoImpl(session=self.session)

        return await super().__aenter__()

    async def _commit(self) -> int:
        # flush never suspends, so cancellation cannot land between validation and write
        try:
            return self.session.flush()
        except CustomBaseError:
            raise
        except Exception as e:
            Logger.base.exception(f'[UOW] Commit failed: {e}')
            raise InfrastructureError(f'Persistence failure: {e}') from e

    async def rollback(self) -> None:
        if self.session.pending:
            Logger.base.debug(f'[UOW] Discarding {len(self.session.pending)} staged change(s)')
        self.session.discard()
