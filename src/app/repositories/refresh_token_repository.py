from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """Refresh token repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Store a new refresh token record"""
        pass

    @abstractmethod
    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get a record by token hash regardless of its state"""
        pass

    @abstractmethod
    async def get_active_by_user(
        self, user_id: UUID, is_admin: bool, now: datetime
    ) -> List[RefreshToken]:
        """Active, unexpired records of one identity"""
        pass

    @abstractmethod
    async def revoke_by_id(self, token_id: UUID) -> bool:
        """Deactivate one record. Returns True if it was active."""
        pass

    @abstractmethod
    async def revoke_all_by_user(self, user_id: UUID, is_admin: bool) -> int:
        """Deactivate every active record of one identity. Returns count."""
        pass
