"""Event Reservation Domain Value Objects"""

from src.service.event_reservation.domain.value_object.email_address import EmailAddress
from src.service.event_reservation.domain.value_object.location import Location

__all__ = ['EmailAddress', 'Location']
