"""
In-memory system of record

Every record carries a version. Writes are never applied one by one: a unit of
work stages them and `apply` validates the whole batch (existence, expected
versions, unique indexes) and writes it under one lock, so a batch is visible
entirely or not at all. Reads hand out deep copies; callers never share state
with the store or with each other.
"""

from collections import defaultdict
from collections.abc import Callable, Hashable, Sequence
import copy
from enum import StrEnum
import threading
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import ConcurrencyConflictError, ConflictError
from src.platform.logging.loguru_io import Logger


class ChangeOp(StrEnum):
    INSERT = 'insert'
    UPDATE = 'update'
    DELETE = 'delete'


@attrs.frozen
class StagedChange:
    table: str
    key: Hashable
    op: ChangeOp
    payload: Any = None
    expected_version: Optional[int] = None


@attrs.frozen
class UniqueIndex:
    table: str
    key_of: Callable[[Any], Hashable]
    message: str
    reason: Optional[str] = None


@attrs.define
class StoredRecord:
    version: int
    payload: Any


class InMemoryDataStore:
    def __init__(self, *, unique_indexes: Sequence[UniqueIndex] = ()) -> None:
        self._tables: defaultdict[str, dict[Hashable, StoredRecord]] = defaultdict(dict)
        self._unique_indexes = tuple(unique_indexes)
        self._lock = threading.Lock()

    def get(self, *, table: str, key: Hashable) -> Optional[StoredRecord]:
        with self._lock:
            record = self._tables[table].get(key)
            if record is None:
                return None
            return StoredRecord(version=record.version, payload=copy.deepcopy(record.payload))

    def scan(self, *, table: str) -> list[StoredRecord]:
        with self._lock:
            return [
                StoredRecord(version=record.version, payload=copy.deepcopy(record.payload))
                for record in self._tables[table].values()
            ]

    def apply(self, *, changes: Sequence[StagedChange]) -> int:
        """
        Validate and write a batch atomically

        Returns:
            Number of changes written

        Raises:
            ConcurrencyConflictError: An update or delete was based on a stale version, or an
                update targets a missing record. A change without expected_version skips
                the version check.
            ConflictError: An insert reuses a key or violates a unique index
        """
        with self._lock:
            versions = self._validate(changes)
            for change in changes:
                table = self._tables[change.table]
                if change.op is ChangeOp.DELETE:
                    table.pop(change.key, None)
                else:
                    table[change.key] = StoredRecord(
                        version=versions[(change.table, change.key)],
                        payload=copy.deepcopy(change.payload),
                    )

        if changes:
            Logger.base.debug(f'[STORE] Applied {len(changes)} change(s)')
        return len(changes)

    def _validate(self, changes: Sequence[StagedChange]) -> dict[tuple[str, Hashable], int]:
        # Overlay of versions as the batch would leave them; None marks a deleted key
        versions: dict[tuple[str, Hashable], Optional[int]] = {}

        def current_version(table: str, key: Hashable) -> Optional[int]:
            if (table, key) in versions:
                return versions[(table, key)]
            record = self._tables[table].get(key)
            return record.version if record else None

        for change in changes:
            version = current_version(change.table, change.key)
            if change.op is ChangeOp.INSERT:
                if version is not None:
                    raise ConflictError(f'Record already exists: {change.table}/{change.key}')
                versions[(change.table, change.key)] = 1
            elif change.op is ChangeOp.UPDATE:
                if version is None:
                    raise ConcurrencyConflictError(
                        f'Update of missing record {change.table}/{change.key}'
                    )
                if change.expected_version is not None and version != change.expected_version:
                    raise ConcurrencyConflictError(
                        f'Stale write on {change.table}/{change.key}: '
                        f'expected version {change.expected_version}, found {version}'
                    )
                versions[(change.table, change.key)] = version + 1
            else:
                if change.expected_version is not None and version != change.expected_version:
                    raise ConcurrencyConflictError(
                        f'Stale delete on {change.table}/{change.key}: '
                        f'expected version {change.expected_version}, found {version}'
                    )
                versions[(change.table, change.key)] = None

        self._check_unique_indexes(changes)
        return {k: v for k, v in versions.items() if v is not None}

    def _check_unique_indexes(self, changes: Sequence[StagedChange]) -> None:
        for index in self._unique_indexes:
            written = {
                change.key: change
                for change in changes
                if change.table == index.table and change.op is not ChangeOp.DELETE
            }
            deleted = {
                change.key
                for change in changes
                if change.table == index.table and change.op is ChangeOp.DELETE
            }
            if not written:
                continue

            owners: dict[Hashable, Hashable] = {
                index.key_of(record.payload): key
                for key, record in self._tables[index.table].items()
                if key not in written and key not in deleted
            }
            for key, change in written.items():
                unique_value = index.key_of(change.payload)
                if owners.setdefault(unique_value, key) != key:
                    raise ConflictError(index.message, index.reason)


class InMemorySession:
    """Changes staged by one unit of work; nothing reaches the store before `flush`."""

    def __init__(self, *, store: InMemoryDataStore) -> None:
        self.store = store
        self._staged: list[StagedChange] = []

    @property
    def pending(self) -> tuple[StagedChange, ...]:
        return tuple(self._staged)

    def stage(self, change: StagedChange) -> None:
        self._staged.append(change)

    def flush(self) -> int:
        changes, self._staged = self._staged, []
        return self.store.apply(changes=changes)

    def discard(self) -> None:
        self._staged.clear()
