"""
Session Issuer

Mints token pairs and the session state that backs them.
Shared by signup, signin and refresh.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID, uuid4

from session_vault.api.utils.crypto import generate_random_token, hash_token
from session_vault.api.utils.jwt import TokenCodec
from session_vault.app.repositories.session_repository import SessionTokens
from session_vault.domain.entities import Session
from .dtos import TokenPairResponse


class SessionIssuer:
    """
    Issues access/refresh pairs bound to a session id.

    The session id is allocated before the access token is signed, so the
    stored access digest always matches the token handed to the caller and
    no follow-up write is needed.
    """

    def __init__(
        self,
        codec: TokenCodec,
        refresh_ttl: timedelta,
        access_expiry_label: str,
    ):
        self.codec = codec
        self.refresh_ttl = refresh_ttl
        self.access_expiry_label = access_expiry_label

    def _mint(
        self, user_id: str, session_id: UUID, now: datetime
    ) -> Tuple[SessionTokens, TokenPairResponse]:
        access_token = self.codec.issue_access_token(user_id, session_id)
        refresh_token = generate_random_token()

        tokens = SessionTokens(
            access_token_hash=hash_token(access_token),
            refresh_token_hash=hash_token(refresh_token),
            access_expires_at=now + self.codec.access_ttl,
            refresh_expires_at=now + self.refresh_ttl,
        )
        response = TokenPairResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            access_token_expiry=self.access_expiry_label,
        )
        return tokens, response

    def new_session(
        self,
        user_id: str,
        now: datetime,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Tuple[Session, TokenPairResponse]:
        """Build a fresh, not yet persisted, session row and its token pair"""
        session_id = uuid4()
        tokens, response = self._mint(user_id, session_id, now)

        session = Session(
            session_id=session_id,
            user_id=user_id,
            access_token_hash=tokens.access_token_hash,
            refresh_token_hash=tokens.refresh_token_hash,
            access_expires_at=tokens.access_expires_at,
            refresh_expires_at=tokens.refresh_expires_at,
            device_info=device_info,
            ip_address=ip_address,
            created_at=now,
            last_activity=now,
        )
        return session, response

    def rotate(
        self, session: Session, now: datetime
    ) -> Tuple[SessionTokens, TokenPairResponse]:
        """New pair for an existing session id"""
        return self._mint(session.user_id, session.session_id, now)
