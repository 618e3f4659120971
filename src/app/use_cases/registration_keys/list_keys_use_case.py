"""
List Registration Keys Use Case
"""

from typing import List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import KeySummary


class ListKeysUseCase:
    """Read-only listing of registration keys, optionally for one tenant"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: Optional[str] = None) -> Result[List[KeySummary]]:
        tenant_uuid = None
        if tenant_id:
            try:
                tenant_uuid = UUID(tenant_id)
            except ValueError:
                return Return.err(
                    Error("VALIDATION_ERROR", "tenant_id is not a valid identifier")
                )

        async with self.uow:
            keys = await self.uow.registration_keys.list_all(tenant_uuid)
            return Return.ok([KeySummary.from_entity(key) for key in keys])
