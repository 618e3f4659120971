from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.base import utcnow
from src.domain.entities import RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """Refresh token repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Store a new refresh token record"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        """Get a record by token hash regardless of its state"""
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_active_by_user(
        self, user_id: UUID, is_admin: bool, now: datetime
    ) -> List[RefreshToken]:
        """Active, unexpired records of one identity"""
        stmt = select(RefreshToken).where(
            RefreshToken.user_id == user_id,
            RefreshToken.is_admin == is_admin,
            RefreshToken.is_active == True,
            RefreshToken.expires_at > now,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def revoke_by_id(self, token_id: UUID) -> bool:
        """Deactivate one record"""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.is_active == True)
            .values(is_active=False, revoked_at=utcnow())
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_by_user(self, user_id: UUID, is_admin: bool) -> int:
        """Deactivate every active record of one identity"""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.user_id == user_id,
                RefreshToken.is_admin == is_admin,
                RefreshToken.is_active == True,
            )
            .values(is_active=False, revoked_at=utcnow())
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
