"""
Authenticate Use Case

Per-request gate in front of every protected operation.
"""

from session_vault.api.utils.jwt import TokenCodec
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.domain.base import utc_now
from session_vault.libs.result import Error, Result, Return
from .dtos import AuthContext


class AuthenticateUseCase:
    """
    Validate an access token against both its signature and its session.

    Business Rules:
    - Signature and signed expiry are checked first (no store access)
    - The referenced session must exist and be active, so logout takes
      effect immediately even though the token itself is still valid
    - The stored access_expires_at is authoritative over the signed exp
    """

    def __init__(self, uow: UnitOfWork, codec: TokenCodec):
        self.uow = uow
        self.codec = codec

    async def execute(self, access_token: str) -> Result[AuthContext]:
        """
        Execute authenticate use case.

        Args:
            access_token: Raw bearer token

        Returns:
            Result with AuthContext, or Error UNAUTHORIZED / TOKEN_EXPIRED
        """
        verified = self.codec.verify_access_token(access_token)
        if verified.is_err():
            return Return.err(verified.error)
        claims = verified.value

        async with self.uow:
            session = await self.uow.sessions.find_by_session_id(claims.session_id)

            if session is None or not session.is_active:
                return Return.err(
                    Error("UNAUTHORIZED", "Session not found or inactive")
                )

            # Token and session must agree on the owner
            if session.user_id != claims.user_id:
                return Return.err(Error("UNAUTHORIZED", "Invalid token"))

            if utc_now() > session.access_expires_at:
                return Return.err(Error("TOKEN_EXPIRED", "Token expired"))

        return Return.ok(
            AuthContext(user_id=claims.user_id, session_id=claims.session_id)
        )
