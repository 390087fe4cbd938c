"""
Entity identifiers

IDs are time-ordered UUIDv7 values generated with uuid_utils and carried as
stdlib `uuid.UUID`, so they compare, hash and deep-copy like any other UUID.
"""

from typing import Any
from uuid import UUID

from uuid_utils import uuid7


NIL_ID = UUID(int=0)


def new_entity_id() -> UUID:
    return UUID(str(uuid7()))


def is_missing_id(value: Any) -> bool:
    return value is None or value == NIL_ID
