from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from session_vault.domain.entities import Session


@dataclass(frozen=True)
class SessionTokens:
    """Replacement token digests and expiries written on rotation"""

    access_token_hash: str
    refresh_token_hash: str
    access_expires_at: datetime
    refresh_expires_at: datetime


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def find_by_refresh_token_hash(
        self, refresh_token_hash: str
    ) -> Optional[Session]:
        """Find an active session by exact refresh token digest"""
        pass

    @abstractmethod
    async def find_by_session_id(self, session_id: UUID) -> Optional[Session]:
        """Find an active session by ID"""
        pass

    @abstractmethod
    async def update(
        self,
        session_id: UUID,
        tokens: SessionTokens,
        expected_refresh_token_hash: Optional[str] = None,
    ) -> bool:
        """
        Overwrite both token digests and both expiries of a session.

        When expected_refresh_token_hash is given the write only applies if the
        stored refresh digest still equals it. Returns True if a row changed.
        """
        pass

    @abstractmethod
    async def delete_by_session_id(self, session_id: UUID, user_id: str) -> bool:
        """Delete one session owned by user_id. Returns True if a row was deleted."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose refresh token expired before now. Returns count."""
        pass
