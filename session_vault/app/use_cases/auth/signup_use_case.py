import logging

from sqlalchemy.exc import IntegrityError

from session_vault.app.services.password_hasher import PasswordHasher
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.domain.base import utc_now
from session_vault.domain.entities import User
from session_vault.libs.result import Error, Result, Return
from .dtos import SignupCommand, TokenPairResponse
from .session_issuer import SessionIssuer

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (validated business intent)
    - Output: Result[TokenPairResponse]

    Business Logic:
    1. Reject an id that is already registered
    2. Hash password with bcrypt
    3. Create User
    4. Open the first session (user is signed in right away)
    5. Commit user and session together
    """

    def __init__(
        self, uow: UnitOfWork, issuer: SessionIssuer, hasher: PasswordHasher
    ):
        self.uow = uow
        self.issuer = issuer
        self.hasher = hasher

    async def execute(self, command: SignupCommand) -> Result[TokenPairResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with validated id and password

        Returns:
            Result[TokenPairResponse] with the new token pair,
            or Error(USER_EXISTS) if the id is taken
        """
        async with self.uow:
            existing_user = await self.uow.users.get_by_id(command.id)
            if existing_user:
                return Return.err(
                    Error("USER_EXISTS", "User with this ID already exists")
                )

            user = User(id=command.id, password_hash=self.hasher.hash(command.password))
            session, response = self.issuer.new_session(
                command.id,
                utc_now(),
                device_info=command.device_info,
                ip_address=command.ip_address,
            )

            try:
                await self.uow.users.create(user)
                await self.uow.sessions.create(session)
                await self.uow.commit()
            except IntegrityError:
                # A concurrent signup claimed the id after the lookup above
                await self.uow.rollback()
                return Return.err(
                    Error("USER_EXISTS", "User with this ID already exists")
                )

            logger.info(
                "User signed up: user_id=%s session_id=%s",
                command.id,
                session.session_id,
            )
            return Return.ok(response)
