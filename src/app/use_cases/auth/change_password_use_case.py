"""
Change Password Use Case
"""

import logging
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.passwords import hash_password, verify_password
from src.app.services.unit_of_work import UnitOfWork

from .dtos import ChangePasswordCommand, ChangePasswordResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for a signed-in user changing their password.

    Business Rules:
    - Current password must verify (INVALID_CREDENTIALS otherwise)
    - New password must differ from the current one
    - Clears must_change_password
    - Signs out every device by revoking all refresh tokens
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: ChangePasswordCommand
    ) -> Result[ChangePasswordResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not user.is_active:
                return Return.err(Error("ACCOUNT_DEACTIVATED", "Account is deactivated"))

            if not verify_password(command.current_password, user.password_hash):
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            if command.current_password == command.new_password:
                return Return.err(
                    Error("VALIDATION_ERROR", "New password must differ from the current one")
                )

            user.password_hash = hash_password(command.new_password)
            user.must_change_password = False
            await self.uow.users.update(user)

            revoked = await self.uow.refresh_tokens.revoke_all_by_user(user.id, False)

            await self.uow.commit()

            logger.info("User %s changed password, %d session(s) revoked", user.id, revoked)
            return Return.ok(
                ChangePasswordResponse(
                    status="success",
                    message="Password changed successfully",
                    revoked_sessions=revoked,
                )
            )
