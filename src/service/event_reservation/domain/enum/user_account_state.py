from enum import StrEnum


class UserAccountState(StrEnum):
    """Derived from the failed-login counter; never stored on its own"""

    ACTIVE = 'active'
    LOCKED = 'locked'
