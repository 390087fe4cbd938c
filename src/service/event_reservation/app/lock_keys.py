"""Lock keys per aggregate; different ids never map to the same key"""

from uuid import UUID

from src.platform.state.aggregate_lock import build_lock_key


def event_lock_key(event_id: UUID) -> str:
    return build_lock_key(kind='event', value=event_id)


def user_lock_key(user_id: UUID) -> str:
    return build_lock_key(kind='user', value=user_id)


def username_lock_key(username: str) -> str:
    return build_lock_key(kind='username', value=username.strip().casefold())


def email_lock_key(email: str) -> str:
    return build_lock_key(kind='email', value=email.strip().casefold())
