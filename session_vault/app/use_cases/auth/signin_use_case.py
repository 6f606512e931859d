"""
Signin Use Case

Authenticates a user and opens a new session for the calling device.
"""

import logging

from session_vault.app.services.password_hasher import PasswordHasher
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.domain.base import utc_now
from session_vault.libs.result import Error, Result, Return
from .dtos import SigninCommand, TokenPairResponse
from .session_issuer import SessionIssuer

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid ID or password"


class SigninUseCase:
    """
    Use case for user signin.

    Business Rules:
    - Same error for unknown id and wrong password (no user enumeration)
    - Constant-time password comparison, dummy check for unknown ids
    - Every signin inserts a NEW session; existing sessions are untouched
    """

    def __init__(
        self, uow: UnitOfWork, issuer: SessionIssuer, hasher: PasswordHasher
    ):
        self.uow = uow
        self.issuer = issuer
        self.hasher = hasher

    async def execute(self, command: SigninCommand) -> Result[TokenPairResponse]:
        """
        Execute signin use case.

        Args:
            command: SigninCommand with id, password and device metadata

        Returns:
            Result with TokenPairResponse, or Error(INVALID_CREDENTIALS)
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(command.id)

            if user is None:
                self.hasher.verify_dummy(command.password)
                return Return.err(
                    Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE)
                )

            if not self.hasher.verify(command.password, user.password_hash):
                return Return.err(
                    Error("INVALID_CREDENTIALS", INVALID_CREDENTIALS_MESSAGE)
                )

            session, response = self.issuer.new_session(
                user.id,
                utc_now(),
                device_info=command.device_info,
                ip_address=command.ip_address,
            )
            await self.uow.sessions.create(session)

            await self.uow.commit()

            logger.info(
                "User signed in: user_id=%s session_id=%s", user.id, session.session_id
            )
            return Return.ok(response)
