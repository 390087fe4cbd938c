"""
Lock -> unit of work -> operation -> commit, with bounded retry

The per-key lock serialises writers inside this process; the versioned commit
catches everything the lock cannot see (another process, a stale snapshot).
Both surface as ConcurrencyConflictError, which is the only error retried.
"""

from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

import anyio

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConcurrencyConflictError
from src.platform.logging.loguru_io import Logger
from src.platform.state.aggregate_lock import AggregateLockRegistry


_T = TypeVar('_T')


class AggregateTransaction:
    def __init__(
        self,
        *,
        lock_registry: AggregateLockRegistry,
        uow_factory: Callable[[], AbstractUnitOfWork],
        max_attempts: int,
        backoff_seconds: float,
    ) -> None:
        self.lock_registry = lock_registry
        self.uow_factory = uow_factory
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds

    async def run(
        self,
        *,
        lock_keys: Iterable[str],
        operation: Callable[[AbstractUnitOfWork], Awaitable[_T]],
    ) -> _T:
        """
        Run `operation` inside the locks and a fresh unit of work, then commit

        The operation only loads, mutates and stages; committing is done here.
        An exception from the operation discards the unit of work untouched.

        Raises:
            ConcurrencyConflictError: When every attempt lost a race
        """
        keys = tuple(lock_keys)
        with Logger.aggregate_scope(keys):
            attempt = 1
            while True:
                try:
                    async with self.lock_registry.hold_many(keys=keys):
                        async with self.uow_factory() as uow:
                            result = await operation(uow)
                            await uow.commit()
                            return result
                except ConcurrencyConflictError as e:
                    if attempt >= self.max_attempts:
                        Logger.base.warning(
                            f'[TX] Giving up on {keys} after {attempt} attempt(s): {e.message}'
                        )
                        raise
                    Logger.base.warning(
                        f'[TX] Conflict on {keys} (attempt {attempt}/{self.max_attempts}), retrying'
                    )
                await anyio.sleep(self.backoff_seconds * attempt)
                attempt += 1
