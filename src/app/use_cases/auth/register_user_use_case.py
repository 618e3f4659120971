"""
Register User Use Case

Creates a tenant user from a registration key.
"""

import asyncio
import logging

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_password
from src.app.services.token_issuer import TokenIssuer
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import DuplicateRecordError, UnitOfWork
from src.app.use_cases.registration_keys.key_matching import (
    INVALID_KEY,
    KEY_EXHAUSTED,
    check_key_usable,
    find_matching_key,
)
from src.domain.base import utcnow
from src.domain.entities import RegistrationKeyUsage, User

from .dtos import RegisterCommand, RegisterResponse, SideEffectInfo, UserInfo

logger = logging.getLogger(__name__)

USER_EXISTS = Error("USER_EXISTS", "User already exists with this email")


class RegisterUserUseCase:
    """
    Register Use Case

    Business Logic:
    1. Find the registration key by bcrypt comparison (INVALID_KEY if none)
    2. Reject revoked, expired or spent keys
    3. Reject keys without a tenant (INVALID_KEY)
    4. Reject an email that is already registered (USER_EXISTS)
    5. Resolve the key's tenant (TENANT_NOT_FOUND)
    6. Create the user in that tenant with the key's account tier
    7. Take one use from the key atomically and append a usage log entry
    8. Issue tokens, commit everything together
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with email, password, name and key

        Returns:
            Result[RegisterResponse] with user and tokens, or Error
        """
        async with self.uow:
            keys = await self.uow.registration_keys.list_all()
            key = await asyncio.to_thread(find_matching_key, keys, command.registration_key)
            if key is None:
                logger.warning("Registration rejected: no matching registration key")
                return Return.err(INVALID_KEY)

            error = check_key_usable(key, utcnow())
            if error is not None:
                logger.warning("Registration rejected with key %s: %s", key.id, error.code)
                return Return.err(error)

            if not key.tenant_id:
                logger.error("Registration key %s has no tenant association", key.id)
                return Return.err(
                    Error("INVALID_KEY", "Invalid registration key - missing tenant association")
                )

            existing_user = await self.uow.users.get_by_email(command.email)
            if existing_user:
                return Return.err(USER_EXISTS)

            tenant = await self.uow.tenants.get_by_id(key.tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Associated tenant not found"))

            user = User(
                email=command.email,
                name=command.name,
                password_hash=hash_password(command.password),
                account_type=key.account_type,
                tenant_id=tenant.id,
                is_active=True,
                must_change_password=False,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateRecordError:
                # Lost race with a concurrent registration of the same email
                logger.warning("Registration rejected: email taken by a concurrent request")
                return Return.err(USER_EXISTS)

            # Lost race: rolled back with the user on __aexit__
            if not await self.uow.registration_keys.consume_use(key.id):
                logger.warning("Registration key %s exhausted by a concurrent request", key.id)
                return Return.err(KEY_EXHAUSTED)

            await self.uow.registration_keys.add_usage(
                RegistrationKeyUsage(
                    key_id=key.id,
                    tenant_id=tenant.id,
                    user_id=user.id,
                    email=user.email,
                    source=command.source,
                )
            )

            issuance = await TokenIssuer(self.uow, self.token_service).issue(user)

            await self.uow.commit()

            logger.info(
                "User %s registered in tenant %s as %s with key %s",
                user.id,
                tenant.id,
                user.account_type.value,
                key.id,
            )
            return Return.ok(
                RegisterResponse(
                    user=UserInfo.from_entity(user),
                    tokens=issuance.tokens,
                    is_new_tenant=False,
                    side_effects=SideEffectInfo.from_issuance(issuance),
                )
            )
