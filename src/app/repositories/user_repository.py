from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """
    Tenant user storage.

    Emails are unique across tenants and compared case-insensitively.
    """

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Persist a new user; its email is stored lower-cased.

        Raises DuplicateRecordError when the email is already taken.
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist changes such as last_login_at or a new password hash"""
        pass
