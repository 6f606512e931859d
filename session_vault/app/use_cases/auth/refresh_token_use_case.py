"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair with single-use rotation.
"""

import logging

from session_vault.api.utils.crypto import hash_token
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.domain.base import utc_now
from session_vault.libs.result import Error, Result, Return
from .dtos import TokenPairResponse
from .session_issuer import SessionIssuer

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Lookup by exact SHA-256 digest of the presented refresh token
    - Unknown, inactive or expired refresh tokens all fail with TOKEN_EXPIRED
    - Rotation: both digests and both expiries are overwritten in place,
      so the presented refresh token can never be used again
    - The overwrite is conditional on the old digest; of two concurrent
      refreshes with the same token only one wins
    """

    def __init__(self, uow: UnitOfWork, issuer: SessionIssuer):
        self.uow = uow
        self.issuer = issuer

    async def execute(self, refresh_token: str) -> Result[TokenPairResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with TokenPairResponse containing new tokens, or Error
        """
        async with self.uow:
            refresh_token_hash = hash_token(refresh_token)
            session = await self.uow.sessions.find_by_refresh_token_hash(
                refresh_token_hash
            )

            if session is None:
                return Return.err(
                    Error("TOKEN_EXPIRED", "Invalid or expired refresh token")
                )

            now = utc_now()
            if now > session.refresh_expires_at:
                return Return.err(Error("TOKEN_EXPIRED", "Refresh token expired"))

            tokens, response = self.issuer.rotate(session, now)

            rotated = await self.uow.sessions.update(
                session.session_id,
                tokens,
                expected_refresh_token_hash=refresh_token_hash,
            )
            if not rotated:
                logger.warning(
                    "Concurrent refresh lost rotation race: session_id=%s",
                    session.session_id,
                )
                return Return.err(
                    Error("TOKEN_EXPIRED", "Invalid or expired refresh token")
                )

            await self.uow.commit()

            logger.info(
                "Session rotated: user_id=%s session_id=%s",
                session.user_id,
                session.session_id,
            )
            return Return.ok(response)
