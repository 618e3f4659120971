"""
Registration Key Usage Use Case
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import KeyUsage, KeyUsageEntry


class GetKeyUsageUseCase:
    """Usage summary of a registration key, including its append-only log"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, key_id: UUID) -> Result[KeyUsage]:
        async with self.uow:
            key = await self.uow.registration_keys.get_by_id(key_id)
            if key is None:
                return Return.err(Error("KEY_NOT_FOUND", "Registration key not found"))

            usages = await self.uow.registration_keys.get_usages(key.id)

            return Return.ok(
                KeyUsage(
                    id=str(key.id),
                    tenant_id=str(key.tenant_id),
                    account_type=key.account_type,
                    uses_allowed=key.uses_allowed,
                    uses_left=key.uses_left,
                    used_logs=[KeyUsageEntry.from_entity(u) for u in usages],
                    revoked=key.revoked,
                    expires_at=key.expires_at,
                    created_at=key.created_at,
                )
            )
