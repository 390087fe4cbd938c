from enum import StrEnum
from typing import Optional


class ErrorKind(StrEnum):
    VALIDATION = 'validation'
    CAPACITY_EXCEEDED = 'capacity_exceeded'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    CONCURRENCY_CONFLICT = 'concurrency_conflict'
    AUTHENTICATION = 'authentication'
    LOCKED_ACCOUNT = 'locked_account'


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, kind: ErrorKind, reason: Optional[str] = None) -> None:
        self.message = message
        self.kind = kind
        self.reason = reason
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(
        self,
        message: str,
        reason: Optional[str] = None,
        kind: ErrorKind = ErrorKind.VALIDATION,
    ) -> None:
        super().__init__(message, kind, reason)


class CapacityExceededError(DomainError):
    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message, reason, ErrorKind.CAPACITY_EXCEEDED)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message, ErrorKind.NOT_FOUND, reason)


class ConflictError(CustomBaseError):
    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message, ErrorKind.CONFLICT, reason)


class ConcurrencyConflictError(CustomBaseError):
    """Version mismatch or lock contention; the only error retried automatically."""

    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message, ErrorKind.CONCURRENCY_CONFLICT, reason)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message, ErrorKind.AUTHENTICATION, reason)


class LockedAccountError(CustomBaseError):
    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message, ErrorKind.LOCKED_ACCOUNT, reason)


class InfrastructureError(Exception):
    """Opaque persistence failure. Not a CustomBaseError: never mapped to a domain result."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
