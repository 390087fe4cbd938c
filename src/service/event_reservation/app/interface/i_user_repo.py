from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.event_reservation.domain.entity.user_entity import User


class IUserRepo(ABC):
    """
    Repository interface for users

    Username and email are unique case-insensitively; a violation fails at commit.
    """

    @abstractmethod
    async def get_by_id(self, *, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, *, email: str) -> Optional[User]:
        """Case-insensitive lookup on the trimmed address"""
        pass

    @abstractmethod
    async def get_by_username(self, *, username: str) -> Optional[User]:
        """Case-insensitive lookup on the trimmed username"""
        pass

    @abstractmethod
    async def add(self, *, user: User) -> None:
        pass

    @abstractmethod
    async def update(self, *, user: User) -> None:
        """Stage an update guarded by `user.version`"""
        pass
