"""
Operation result DTO

Use cases return this instead of raising: typed domain errors are translated into
(error_kind, reason, message) at the application boundary. Infrastructure failures
are not translated and still propagate as exceptions.
"""

from typing import Generic, Optional, TypeVar

import attrs

from src.platform.exception.exceptions import CustomBaseError, ErrorKind


_T = TypeVar('_T')


@attrs.define(frozen=True)
class OperationResult(Generic[_T]):
    succeeded: bool
    data: Optional[_T] = None
    error_kind: Optional[ErrorKind] = None
    reason: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, data: Optional[_T] = None) -> 'OperationResult[_T]':
        return cls(succeeded=True, data=data)

    @classmethod
    def failure(
        cls, *, kind: ErrorKind, message: str, reason: Optional[str] = None
    ) -> 'OperationResult[_T]':
        return cls(succeeded=False, error_kind=kind, reason=reason, message=message)

    @classmethod
    def from_error(cls, error: CustomBaseError) -> 'OperationResult[_T]':
        return cls.failure(kind=error.kind, message=error.message, reason=error.reason)

    @property
    def failed(self) -> bool:
        return not self.succeeded
