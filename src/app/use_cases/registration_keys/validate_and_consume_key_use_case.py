"""
Validate And Consume Registration Key Use Case

Checks a plaintext key against a tenant and takes one use from it.
"""

import asyncio
import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import RegistrationKeyUsage

from .dtos import ConsumedKey
from .key_matching import (
    INVALID_KEY,
    KEY_EXHAUSTED,
    KEY_TENANT_MISMATCH,
    check_key_usable,
    find_matching_key,
)

logger = logging.getLogger(__name__)


class ValidateAndConsumeKeyUseCase:
    """
    Use case for consuming a registration key on behalf of a tenant.

    Business Rules:
    - Key found by bcrypt comparison against every stored hash
    - Checked in order: revoked, expired, exhausted, tenant mismatch
    - Each failure has its own error code
    - The decrement is a conditional UPDATE, so concurrent consumers can
      never redeem more than uses_allowed times
    - Each consumption appends a usage log entry in the same transaction
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, plaintext_key: str, tenant_id: str, source: str = "system"
    ) -> Result[ConsumedKey]:
        """
        Execute validate and consume use case.

        Args:
            plaintext_key: Key as handed out at generation time
            tenant_id: Tenant the caller wants to join
            source: Where the request came from (client IP or "system")

        Returns:
            Result with ConsumedKey (account type and tenant), or Error
        """
        try:
            tenant_uuid = UUID(str(tenant_id).strip())
        except ValueError:
            return Return.err(Error("VALIDATION_ERROR", "tenant_id is not a valid identifier"))

        async with self.uow:
            keys = await self.uow.registration_keys.list_all()
            key = await asyncio.to_thread(find_matching_key, keys, plaintext_key)

            if key is None:
                logger.warning("Registration key validation failed: no matching key")
                return Return.err(INVALID_KEY)

            error = check_key_usable(key, utcnow())
            if error is None and key.tenant_id != tenant_uuid:
                error = KEY_TENANT_MISMATCH
            if error is not None:
                logger.warning(
                    "Registration key %s rejected for tenant %s: %s",
                    key.id,
                    tenant_id,
                    error.code,
                )
                return Return.err(error)

            if not await self.uow.registration_keys.consume_use(key.id):
                logger.warning("Registration key %s exhausted by a concurrent request", key.id)
                return Return.err(KEY_EXHAUSTED)

            await self.uow.registration_keys.add_usage(
                RegistrationKeyUsage(
                    key_id=key.id,
                    tenant_id=key.tenant_id,
                    source=source,
                )
            )

            await self.uow.commit()

            logger.info("Registration key %s consumed for tenant %s", key.id, key.tenant_id)
            return Return.ok(
                ConsumedKey(account_type=key.account_type, tenant_id=str(key.tenant_id))
            )
