"""Event Reservation Domain Enums"""

from src.service.event_reservation.domain.enum.error_reason import ErrorReason
from src.service.event_reservation.domain.enum.event_category import EventCategory
from src.service.event_reservation.domain.enum.user_account_state import UserAccountState
from src.service.event_reservation.domain.enum.user_role import UserRole

__all__ = ['ErrorReason', 'EventCategory', 'UserAccountState', 'UserRole']
