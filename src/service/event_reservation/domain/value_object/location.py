from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.event_reservation.domain.enum.error_reason import ErrorReason


@attrs.frozen
class Location:
    city: str
    address_line: str

    @classmethod
    def create(cls, *, city: Optional[str], address_line: Optional[str]) -> 'Location':
        if not city or not city.strip():
            raise DomainError('City is required.', ErrorReason.CITY_REQUIRED)
        if not address_line or not address_line.strip():
            raise DomainError('Address is required.', ErrorReason.ADDRESS_REQUIRED)

        return cls(city=city.strip(), address_line=address_line.strip())

    def __str__(self) -> str:
        return f'{self.address_line}, {self.city}'
