"""
Error reasons - one per distinct rule violation

ErrorKind (platform) says how a failure should be treated; ErrorReason says which
rule was broken, so callers can tell e.g. a blank title from an over-long one.
"""

from enum import StrEnum


class ErrorReason(StrEnum):
    # Event
    TITLE_REQUIRED = 'title_required'
    TITLE_TOO_LONG = 'title_too_long'
    DESCRIPTION_REQUIRED = 'description_required'
    START_TIME_INVALID = 'start_time_invalid'
    START_IN_PAST = 'start_in_past'
    DURATION_TOO_SHORT = 'duration_too_short'
    CAPACITY_NOT_POSITIVE = 'capacity_not_positive'
    CAPACITY_TOO_LARGE = 'capacity_too_large'
    CAPACITY_BELOW_RESERVED = 'capacity_below_reserved'
    CATEGORY_INVALID = 'category_invalid'
    EVENT_NOT_FOUND = 'event_not_found'
    EVENT_CANCELLED = 'event_cancelled'
    EVENT_HAS_ACTIVE_RESERVATIONS = 'event_has_active_reservations'

    # Reservation
    INVALID_EVENT = 'invalid_event'
    INVALID_USER = 'invalid_user'
    INVALID_QUANTITY = 'invalid_quantity'
    CAPACITY_EXCEEDED = 'capacity_exceeded'
    RESERVATION_NOT_FOUND = 'reservation_not_found'

    # Value objects
    EMAIL_REQUIRED = 'email_required'
    EMAIL_INVALID = 'email_invalid'
    CITY_REQUIRED = 'city_required'
    ADDRESS_REQUIRED = 'address_required'

    # User / auth
    USERNAME_REQUIRED = 'username_required'
    PASSWORD_HASH_REQUIRED = 'password_hash_required'
    PASSWORD_TOO_SHORT = 'password_too_short'
    PASSWORD_TOO_LONG = 'password_too_long'
    ROLE_REQUIRED = 'role_required'
    ROLE_INVALID = 'role_invalid'
    USERNAME_TAKEN = 'username_taken'
    EMAIL_TAKEN = 'email_taken'
    USER_NOT_FOUND = 'user_not_found'
    CREDENTIALS_REQUIRED = 'credentials_required'
    INVALID_CREDENTIALS = 'invalid_credentials'
    ACCOUNT_LOCKED = 'account_locked'

    # Persistence
    VERSION_CONFLICT = 'version_conflict'
