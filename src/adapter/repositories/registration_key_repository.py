from typing import List, Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.registration_key_repository import IRegistrationKeyRepository
from src.domain.entities import RegistrationKey, RegistrationKeyUsage


class RegistrationKeyRepository(IRegistrationKeyRepository):
    """Registration key repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, key: RegistrationKey) -> RegistrationKey:
        """Create a new registration key"""
        self.session.add(key)
        await self.session.flush()
        await self.session.refresh(key)
        return key

    async def get_by_id(self, key_id: UUID) -> Optional[RegistrationKey]:
        """Get registration key by ID"""
        stmt = select(RegistrationKey).where(RegistrationKey.id == key_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, tenant_id: Optional[UUID] = None) -> List[RegistrationKey]:
        """
        List keys, newest first.

        NOTE: key validation scans this list and checks bcrypt hashes one by
        one, since only the hash is stored there is no index by plaintext.
        """
        stmt = select(RegistrationKey).order_by(RegistrationKey.created_at.desc())
        if tenant_id is not None:
            stmt = stmt.where(RegistrationKey.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def revoke(self, key_id: UUID) -> bool:
        """Mark a key revoked (idempotent)"""
        key = await self.get_by_id(key_id)
        if key is None:
            return False
        if not key.revoked:
            key.revoked = True
            self.session.add(key)
            await self.session.flush()
        return True

    async def consume_use(self, key_id: UUID) -> bool:
        """
        Conditional decrement in a single UPDATE.

        The row lock taken by the UPDATE serializes concurrent consumers, so
        at most uses_left of them can ever see rowcount == 1.
        """
        stmt = (
            update(RegistrationKey)
            .where(
                RegistrationKey.id == key_id,
                RegistrationKey.uses_left > 0,
                RegistrationKey.revoked == False,
            )
            .values(uses_left=RegistrationKey.uses_left - 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        consumed = result.rowcount == 1

        # Reload so a key already in the session shows the new uses_left
        await self.session.execute(
            select(RegistrationKey)
            .where(RegistrationKey.id == key_id)
            .execution_options(populate_existing=True)
        )
        return consumed

    async def add_usage(self, usage: RegistrationKeyUsage) -> RegistrationKeyUsage:
        """Append a usage log entry"""
        self.session.add(usage)
        await self.session.flush()
        await self.session.refresh(usage)
        return usage

    async def get_usages(self, key_id: UUID) -> List[RegistrationKeyUsage]:
        """Usage log of a key, oldest first"""
        stmt = (
            select(RegistrationKeyUsage)
            .where(RegistrationKeyUsage.key_id == key_id)
            .order_by(RegistrationKeyUsage.used_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
