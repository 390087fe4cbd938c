"""
Per-aggregate lock table

One lock per lock key (e.g. "lock:event:<id>"), created on first use and dropped
once no caller holds or waits for it. Contention is scoped to a single key: work
on different aggregates never shares a lock.

Each key is a threading.Lock taken with a non-blocking try, retried with a short
async backoff until the timeout (SET NX style). Holders on other threads or other
event loops therefore exclude each other, and a waiting task stays cancellable.
Locks are not re-entrant: taking a key the current task already holds fails fast.
"""

import threading
from collections.abc import AsyncIterator, Iterable
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Optional

import anyio
import attrs

from src.platform.exception.exceptions import ConcurrencyConflictError
from src.platform.logging.loguru_io import Logger


MIN_RETRY_INTERVAL_SECONDS = 0.001
MAX_RETRY_INTERVAL_SECONDS = 0.02


@attrs.define
class _LockEntry:
    lock: threading.Lock = attrs.field(factory=threading.Lock)
    owner: Optional[tuple[int, int]] = None
    users: int = 0


def build_lock_key(*, kind: str, value: object) -> str:
    return f'lock:{kind}:{value}'


def _current_owner() -> tuple[int, int]:
    return threading.get_ident(), anyio.get_current_task().id


async def _acquire(lock: threading.Lock) -> None:
    interval = MIN_RETRY_INTERVAL_SECONDS
    while not lock.acquire(blocking=False):
        await anyio.sleep(interval)
        interval = min(interval * 2, MAX_RETRY_INTERVAL_SECONDS)


class AggregateLockRegistry:
    def __init__(self, *, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds
        self._entries: dict[str, _LockEntry] = {}
        self._guard = threading.Lock()

    @property
    def active_keys(self) -> frozenset[str]:
        with self._guard:
            return frozenset(self._entries)

    @asynccontextmanager
    async def hold(self, *, key: str) -> AsyncIterator[None]:
        """
        Hold the lock for one key for the duration of the block

        Raises:
            ConcurrencyConflictError: If the current task already holds the key, or the
                lock is not acquired within the timeout
        """
        owner = _current_owner()
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            if entry.owner == owner:
                raise ConcurrencyConflictError(f'Lock already held by this task: {key}')
            entry.users += 1

        try:
            try:
                with anyio.fail_after(self._timeout_seconds):
                    await _acquire(entry.lock)
            except TimeoutError as e:
                Logger.base.warning(
                    f'[LOCK] Timed out after {self._timeout_seconds}s waiting for {key}'
                )
                raise ConcurrencyConflictError(f'Resource is busy: {key}') from e

            entry.owner = owner
            Logger.base.debug(f'[LOCK] Acquired {key}')
            try:
                yield
            finally:
                entry.owner = None
                entry.lock.release()
                Logger.base.debug(f'[LOCK] Released {key}')
        finally:
            with self._guard:
                entry.users -= 1
                if not entry.users:
                    self._entries.pop(key, None)

    @asynccontextmanager
    async def hold_many(self, *, keys: Iterable[str]) -> AsyncIterator[None]:
        """Hold several keys at once; acquisition order is sorted to rule out deadlocks."""
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                await stack.enter_async_context(self.hold(key=key))
            yield
