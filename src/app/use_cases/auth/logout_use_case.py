"""
Logout Use Case

Logout on one device: deactivates the presented refresh token.
"""

from libs.result import Result, Return
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork

from .dtos import LogoutResponse


class LogoutUseCase:
    """
    Business Rules:
    - Idempotent: unknown or already revoked tokens still succeed
    - Only the presented token is affected; other devices stay signed in
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, refresh_token: str) -> Result[LogoutResponse]:
        token_hash = self.token_service.hash_refresh_token(refresh_token)

        async with self.uow:
            stored = await self.uow.refresh_tokens.get_by_hash(token_hash)
            if stored is None or not stored.is_active:
                return Return.ok(LogoutResponse(revoked=False))

            revoked = await self.uow.refresh_tokens.revoke_by_id(stored.id)
            await self.uow.commit()

            return Return.ok(LogoutResponse(revoked=revoked))
