import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from session_vault.libs.result import Error, Result, Return

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class AccessClaims:
    """Identity carried by a verified access token"""

    user_id: str
    session_id: UUID


class TokenCodec:
    """
    Signs and verifies stateless access tokens.

    The signing secret and time-to-live are fixed at construction and
    stay immutable for the life of the process.
    """

    def __init__(self, secret: str, access_ttl: timedelta):
        self._secret = secret
        self.access_ttl = access_ttl

    def issue_access_token(self, user_id: str, session_id: UUID) -> str:
        """
        Generate JWT access token

        Args:
            user_id: Login identifier (email or phone)
            session_id: Session the token is bound to

        Returns:
            JWT token string (HS256)
        """
        now = datetime.now(UTC)
        payload = {
            "user_id": user_id,
            "session_id": str(session_id),
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.access_ttl,
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify_access_token(self, token: str) -> Result[AccessClaims]:
        """
        Verify signature and signed expiry of an access token.

        Does not consult the session store.

        Returns:
            Result with AccessClaims, or Error TOKEN_EXPIRED / UNAUTHORIZED
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            return Return.err(Error("TOKEN_EXPIRED", "Token expired"))
        except JWTError:
            return Return.err(Error("UNAUTHORIZED", "Invalid token"))

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return Return.err(Error("UNAUTHORIZED", "Invalid token"))

        user_id = payload.get("user_id")
        try:
            session_id = UUID(str(payload.get("session_id")))
        except ValueError:
            return Return.err(Error("UNAUTHORIZED", "Invalid token"))

        if not user_id:
            return Return.err(Error("UNAUTHORIZED", "Invalid token"))

        return Return.ok(AccessClaims(user_id=user_id, session_id=session_id))
