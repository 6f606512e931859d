import logging
from uuid import UUID

from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.libs.result import Result, Return
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    """
    Revoke the caller's current session only.

    Other sessions of the same user (other devices) stay active.
    Idempotent: a session that is already gone is not an error.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_id: UUID, user_id: str) -> Result[LogoutResponse]:
        async with self.uow:
            revoked = await self.uow.sessions.delete_by_session_id(session_id, user_id)
            await self.uow.commit()

            logger.info(
                "Session revoked: user_id=%s session_id=%s existed=%s",
                user_id,
                session_id,
                revoked,
            )
            return Return.ok(
                LogoutResponse(message="Logged out successfully", revoked=revoked)
            )
