from abc import ABC, abstractmethod
from typing import AsyncContextManager

from src.app.repositories.admin_repository import IAdminRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.app.repositories.registration_key_repository import IRegistrationKeyRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import IUserRepository


class StorageError(Exception):
    """Raised by the persistence layer when a statement inside a savepoint fails"""


class DuplicateRecordError(StorageError):
    """Raised when an insert collides with a unique constraint"""


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    admins: IAdminRepository
    tenants: ITenantRepository
    registration_keys: IRegistrationKeyRepository
    refresh_tokens: IRefreshTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    def savepoint(self) -> AsyncContextManager[None]:
        """
        Nested transaction for best-effort writes.

        A failure inside rolls back only the savepoint and surfaces as
        StorageError, leaving the outer transaction usable.
        """
        pass
