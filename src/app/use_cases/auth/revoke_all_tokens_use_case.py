"""
Revoke All Tokens Use Case

Logout everywhere: deactivates every refresh token of one identity.
"""

import logging
from uuid import UUID

from libs.result import Result, Return
from src.app.services.token_issuer import SideEffect
from src.app.services.unit_of_work import StorageError, UnitOfWork

from .dtos import RevokeAllResponse, SideEffectInfo

logger = logging.getLogger(__name__)


class RevokeAllTokensUseCase:
    """
    Use case for bulk refresh token revocation.

    Business Rules:
    - Admin and user tokens are tracked separately (is_admin)
    - Access tokens already issued stay valid until they expire
    - A storage failure is logged and reported, not raised
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, is_admin: bool = False) -> Result[RevokeAllResponse]:
        async with self.uow:
            count = 0
            try:
                async with self.uow.savepoint():
                    count = await self.uow.refresh_tokens.revoke_all_by_user(user_id, is_admin)
                effect = SideEffect("revoke_refresh_tokens", succeeded=True)
            except StorageError as exc:
                logger.error("Error revoking tokens for %s: %s", user_id, exc)
                effect = SideEffect("revoke_refresh_tokens", succeeded=False, error=str(exc))

            await self.uow.commit()

            logger.info(
                "Revoked %d refresh token(s) for %s %s",
                count,
                "admin" if is_admin else "user",
                user_id,
            )
            return Return.ok(
                RevokeAllResponse(
                    revoked_count=count, side_effects=[SideEffectInfo.from_effect(effect)]
                )
            )
