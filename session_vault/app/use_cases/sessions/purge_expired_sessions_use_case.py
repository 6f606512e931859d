"""
Use Case: Purge Expired Sessions

Removes sessions whose refresh token has expired. Meant to be triggered
periodically by an external scheduler through the admin API.
"""

import logging

from pydantic import BaseModel

from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.domain.base import utc_now
from session_vault.libs.result import Result, Return

logger = logging.getLogger(__name__)


class PurgeExpiredSessionsResponse(BaseModel):
    """Response DTO for PurgeExpiredSessionsUseCase"""

    status: str
    purged_count: int


class PurgeExpiredSessionsUseCase:
    """
    Delete every session past refresh_expires_at.

    Expired sessions are terminal; there is nothing to restore, so rows are
    deleted rather than flagged.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[PurgeExpiredSessionsResponse]:
        async with self.uow:
            count = await self.uow.sessions.delete_expired(utc_now())
            await self.uow.commit()

        logger.info("Purged %d expired session(s)", count)
        return Return.ok(PurgeExpiredSessionsResponse(status="purged", purged_count=count))
