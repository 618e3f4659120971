"""
Login User Use Case

Authenticates a tenant user and issues a token pair.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.passwords import burn_password_check, verify_password
from src.app.services.token_issuer import TokenIssuer
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow

from .dtos import LoginResponse, SideEffectInfo, UserInfo

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUserUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Unknown email and wrong password return the same error, and both spend
      one bcrypt verification (no account enumeration)
    - Deactivated accounts are rejected after the password check
    - Updates user.last_login_at
    - Issues a new token pair; earlier refresh tokens stay active
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing user and tokens, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                burn_password_check(password)
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(password, user.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            if not user.is_active:
                return Return.err(Error("ACCOUNT_DEACTIVATED", "Account is deactivated"))

            user.last_login_at = utcnow()
            user = await self.uow.users.update(user)

            issuance = await TokenIssuer(self.uow, self.token_service).issue(user)

            await self.uow.commit()

            logger.info("User %s logged in (tenant %s)", user.id, user.tenant_id)
            return Return.ok(
                LoginResponse(
                    user=UserInfo.from_entity(user),
                    tokens=issuance.tokens,
                    side_effects=SideEffectInfo.from_issuance(issuance),
                )
            )
