from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RegistrationKey, RegistrationKeyUsage


class IRegistrationKeyRepository(ABC):
    """Registration key repository interface - application layer"""

    @abstractmethod
    async def create(self, key: RegistrationKey) -> RegistrationKey:
        """Create a new registration key"""
        pass

    @abstractmethod
    async def get_by_id(self, key_id: UUID) -> Optional[RegistrationKey]:
        """Get registration key by ID"""
        pass

    @abstractmethod
    async def list_all(self, tenant_id: Optional[UUID] = None) -> List[RegistrationKey]:
        """List keys, optionally restricted to one tenant"""
        pass

    @abstractmethod
    async def revoke(self, key_id: UUID) -> bool:
        """Mark a key revoked. Returns True if the key exists."""
        pass

    @abstractmethod
    async def consume_use(self, key_id: UUID) -> bool:
        """
        Atomically decrement uses_left if the key is not revoked and has uses left.

        Returns False when no use could be taken (lost a race or already spent).
        """
        pass

    @abstractmethod
    async def add_usage(self, usage: RegistrationKeyUsage) -> RegistrationKeyUsage:
        """Append a usage log entry"""
        pass

    @abstractmethod
    async def get_usages(self, key_id: UUID) -> List[RegistrationKeyUsage]:
        """Usage log of a key, oldest first"""
        pass
