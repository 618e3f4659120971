"""
Generate Registration Key Use Case

Issues a tenant-scoped onboarding key and returns its plaintext once.
"""

import logging
import secrets
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_naive_utc, utcnow
from src.domain.entities import RegistrationKey

from .dtos import GeneratedKey, GenerateKeyCommand
from .key_matching import generate_key_hash

logger = logging.getLogger(__name__)


class GenerateKeyUseCase:
    """
    Use case for generating registration keys.

    Business Rules:
    - tenant_id is mandatory and must reference an existing tenant
    - Key material: 32 random bytes (hex); only the bcrypt hash is stored
    - uses_allowed defaults to 1; single_use defaults to uses_allowed == 1
    - A single-use key cannot allow more than one use
    - expires_at, when given, must be in the future
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: GenerateKeyCommand, created_by: str
    ) -> Result[GeneratedKey]:
        """
        Execute generate key use case.

        Args:
            command: GenerateKeyCommand with tenant, tier and usage limits
            created_by: Identifier of the admin generating the key

        Returns:
            Result with GeneratedKey (plaintext included), or Error
        """
        if not command.tenant_id or not command.tenant_id.strip():
            return Return.err(
                Error("VALIDATION_ERROR", "tenant_id is required to generate a registration key")
            )
        try:
            tenant_id = UUID(command.tenant_id.strip())
        except ValueError:
            return Return.err(Error("VALIDATION_ERROR", "tenant_id is not a valid identifier"))

        uses_allowed = command.uses_allowed if command.uses_allowed is not None else 1
        if uses_allowed < 1:
            return Return.err(Error("VALIDATION_ERROR", "uses_allowed must be at least 1"))

        single_use = command.single_use if command.single_use is not None else uses_allowed == 1
        if single_use and uses_allowed > 1:
            return Return.err(
                Error("VALIDATION_ERROR", "A single-use key cannot allow more than one use")
            )

        expires_at = as_naive_utc(command.expires_at) if command.expires_at else None
        if expires_at is not None and expires_at <= utcnow():
            return Return.err(Error("VALIDATION_ERROR", "expires_at must be in the future"))

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            plaintext_key = secrets.token_hex(32)

            key = RegistrationKey(
                key_hash=generate_key_hash(plaintext_key),
                tenant_id=tenant.id,
                account_type=command.account_type,
                uses_allowed=uses_allowed,
                uses_left=uses_allowed,
                single_use=single_use,
                expires_at=expires_at,
                key_metadata=command.metadata or {},
                created_by=created_by,
                revoked=False,
            )
            key = await self.uow.registration_keys.create(key)

            await self.uow.commit()

            logger.info(
                "Registration key %s generated for tenant %s (%s, %d use(s))",
                key.id,
                tenant.id,
                command.account_type.value,
                uses_allowed,
            )

            return Return.ok(
                GeneratedKey(
                    id=str(key.id),
                    key=plaintext_key,
                    tenant_id=str(tenant.id),
                    account_type=command.account_type,
                    uses_allowed=uses_allowed,
                    single_use=single_use,
                    expires_at=expires_at,
                )
            )
