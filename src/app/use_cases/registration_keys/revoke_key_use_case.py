"""
Revoke Registration Key Use Case
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import KeySummary

logger = logging.getLogger(__name__)


class RevokeKeyUseCase:
    """
    Use case for revoking registration keys.

    Business Rules:
    - Revocation is idempotent (revoking twice succeeds)
    - A revoked key never validates again, whatever its uses_left
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, key_id: UUID) -> Result[KeySummary]:
        async with self.uow:
            found = await self.uow.registration_keys.revoke(key_id)
            if not found:
                return Return.err(Error("KEY_NOT_FOUND", "Registration key not found"))

            await self.uow.commit()

            key = await self.uow.registration_keys.get_by_id(key_id)
            logger.info("Registration key %s revoked", key_id)
            return Return.ok(KeySummary.from_entity(key))
