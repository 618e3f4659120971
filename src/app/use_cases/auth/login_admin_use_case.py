"""
Login Admin Use Case

Authenticates a platform admin against the admin credential store.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.passwords import burn_password_check, verify_password
from src.app.services.token_issuer import TokenIssuer
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow

from .dtos import AdminInfo, AdminLoginResponse, SideEffectInfo
from .login_user_use_case import INVALID_CREDENTIALS

logger = logging.getLogger(__name__)


class LoginAdminUseCase:
    """
    Use case for admin login.

    Same rules as user login; tokens carry `role` instead of tenant claims.
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, email: str, password: str) -> Result[AdminLoginResponse]:
        async with self.uow:
            admin = await self.uow.admins.get_by_email(email)

            if admin is None:
                burn_password_check(password)
                return Return.err(INVALID_CREDENTIALS)

            if not verify_password(password, admin.password_hash):
                return Return.err(INVALID_CREDENTIALS)

            if not admin.is_active:
                return Return.err(Error("ACCOUNT_DEACTIVATED", "Account is deactivated"))

            admin.last_login_at = utcnow()
            admin = await self.uow.admins.update(admin)

            issuance = await TokenIssuer(self.uow, self.token_service).issue(admin)

            await self.uow.commit()

            logger.info("Admin %s logged in", admin.id)
            return Return.ok(
                AdminLoginResponse(
                    admin=AdminInfo.from_entity(admin),
                    tokens=issuance.tokens,
                    side_effects=SideEffectInfo.from_issuance(issuance),
                )
            )
