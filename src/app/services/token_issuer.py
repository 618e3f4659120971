"""
Token Issuer

Signs a token pair and records the refresh token hash.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import Admin, RefreshToken

from .token_service import Identity, TokenService
from .unit_of_work import StorageError, UnitOfWork

logger = logging.getLogger(__name__)


class TokenPair(BaseModel):
    """Access/refresh token pair returned to clients"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


@dataclass(frozen=True)
class SideEffect:
    """Outcome of a best-effort write that must not fail the primary operation"""

    name: str
    succeeded: bool
    error: Optional[str] = None


@dataclass
class TokenIssuance:
    tokens: TokenPair
    side_effects: List[SideEffect] = field(default_factory=list)


class TokenIssuer:
    """
    Issues tokens inside the caller's unit of work.

    Business Rules:
    - Every issuance stores a new refresh token record; older ones stay active
    - Failing to store the record is logged and reported, never raised
    - The caller commits
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def issue(self, identity: Identity) -> TokenIssuance:
        access_token = self.token_service.create_access_token(identity)
        refresh_token = self.token_service.create_refresh_token(identity)

        record = RefreshToken(
            user_id=identity.id,
            is_admin=isinstance(identity, Admin),
            token_hash=self.token_service.hash_refresh_token(refresh_token),
            expires_at=self.token_service.refresh_expires_at(),
            is_active=True,
        )

        try:
            async with self.uow.savepoint():
                await self.uow.refresh_tokens.create(record)
            effect = SideEffect("store_refresh_token", succeeded=True)
        except StorageError as exc:
            logger.error(
                "Error storing refresh token for %s: %s", identity.id, exc
            )
            effect = SideEffect("store_refresh_token", succeeded=False, error=str(exc))

        return TokenIssuance(
            tokens=TokenPair(access_token=access_token, refresh_token=refresh_token),
            side_effects=[effect],
        )
