import re
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


@attrs.frozen
class EmailAddress:
    value: str

    @classmethod
    def create(cls, value: Optional[str]) -> 'EmailAddress':
        """Trim and validate; the trimmed string is stored as given (no case folding)"""
        if not value or not value.strip():
            raise DomainError('Email is required.', ErrorReason.EMAIL_REQUIRED)

        trimmed = value.strip()
        if not EMAIL_PATTERN.match(trimmed):
            raise DomainError('Email format is invalid.', ErrorReason.EMAIL_INVALID)

        return cls(value=trimmed)

    @property
    def normalized(self) -> str:
        return self.value.casefold()

    def __str__(self) -> str:
        return self.value
