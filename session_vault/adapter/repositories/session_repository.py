from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from session_vault.app.repositories.session_repository import (
    ISessionRepository,
    SessionTokens,
)
from session_vault.domain.base import utc_now
from session_vault.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def find_by_refresh_token_hash(
        self, refresh_token_hash: str
    ) -> Optional[Session]:
        """Find an active session by exact refresh token digest"""
        stmt = select(Session).where(
            Session.refresh_token_hash == refresh_token_hash,
            Session.is_active == True,  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def find_by_session_id(self, session_id: UUID) -> Optional[Session]:
        """Find an active session by ID"""
        stmt = select(Session).where(
            Session.session_id == session_id,
            Session.is_active == True,  # noqa: E712
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(
        self,
        session_id: UUID,
        tokens: SessionTokens,
        expected_refresh_token_hash: Optional[str] = None,
    ) -> bool:
        """
        Overwrite token digests and expiries.

        With expected_refresh_token_hash the UPDATE doubles as a compare-and-swap:
        a concurrent rotation that already replaced the digest leaves 0 rows matched.
        """
        stmt = update(Session).where(Session.session_id == session_id)
        if expected_refresh_token_hash is not None:
            stmt = stmt.where(
                Session.refresh_token_hash == expected_refresh_token_hash,
                Session.is_active == True,  # noqa: E712
            )
        stmt = stmt.values(
            access_token_hash=tokens.access_token_hash,
            refresh_token_hash=tokens.refresh_token_hash,
            access_expires_at=tokens.access_expires_at,
            refresh_expires_at=tokens.refresh_expires_at,
            last_activity=utc_now(),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_session_id(self, session_id: UUID, user_id: str) -> bool:
        """Delete one session, scoped to its owner"""
        stmt = delete(Session).where(
            Session.session_id == session_id, Session.user_id == user_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_expired(self, now: datetime) -> int:
        """Delete sessions past refresh_expires_at"""
        stmt = delete(Session).where(Session.refresh_expires_at < now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
