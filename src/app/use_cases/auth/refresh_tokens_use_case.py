"""
Refresh Tokens Use Case

Rotates a refresh token: the presented token is deactivated and a new pair
is issued.
"""

import hmac
import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.token_issuer import TokenIssuer
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow

from .dtos import AdminInfo, RefreshResponse, SideEffectInfo, UserInfo

logger = logging.getLogger(__name__)

INVALID_TOKEN = Error("INVALID_TOKEN", "Invalid or expired refresh token")


class RefreshTokensUseCase:
    """
    Use case for refreshing JWT tokens.

    Business Rules:
    - Signature, issuer, audience and expiry must verify
    - The token must match an active, unexpired stored hash of its owner,
      so server-side revocation takes effect before expiry
    - Fresh identity state is reloaded; deactivated accounts are rejected
    - Rotation: the presented token is deactivated, a new pair is issued
    - Presenting an already rotated token is logged as possible theft
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, refresh_token: str) -> Result[RefreshResponse]:
        """
        Execute refresh tokens use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with RefreshResponse containing identity and new tokens, or Error
        """
        claims = self.token_service.decode_refresh_token(refresh_token)
        if claims is None or "user_id" not in claims:
            return Return.err(INVALID_TOKEN)

        try:
            owner_id = UUID(claims["user_id"])
        except ValueError:
            return Return.err(INVALID_TOKEN)
        is_admin = "role" in claims

        async with self.uow:
            token_hash = self.token_service.hash_refresh_token(refresh_token)
            active_tokens = await self.uow.refresh_tokens.get_active_by_user(
                owner_id, is_admin, utcnow()
            )
            matching = next(
                (t for t in active_tokens if hmac.compare_digest(t.token_hash, token_hash)),
                None,
            )

            if matching is None:
                stored = await self.uow.refresh_tokens.get_by_hash(token_hash)
                if stored is not None and not stored.is_active:
                    logger.warning(
                        "Reuse of revoked refresh token %s for %s", stored.id, owner_id
                    )
                return Return.err(INVALID_TOKEN)

            if is_admin:
                identity = await self.uow.admins.get_by_id(owner_id)
            else:
                identity = await self.uow.users.get_by_id(owner_id)

            if identity is None:
                return Return.err(INVALID_TOKEN)
            if not identity.is_active:
                return Return.err(Error("ACCOUNT_DEACTIVATED", "Account is deactivated"))

            # Conditional on is_active: a concurrent rotation of the same token wins once
            if not await self.uow.refresh_tokens.revoke_by_id(matching.id):
                logger.warning(
                    "Reuse of refresh token %s for %s during rotation", matching.id, owner_id
                )
                return Return.err(INVALID_TOKEN)

            issuance = await TokenIssuer(self.uow, self.token_service).issue(identity)

            await self.uow.commit()

            info = AdminInfo.from_entity(identity) if is_admin else UserInfo.from_entity(identity)
            return Return.ok(
                RefreshResponse(
                    user=info,
                    tokens=issuance.tokens,
                    side_effects=SideEffectInfo.from_issuance(issuance),
                )
            )
