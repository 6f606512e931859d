"""
Session Entity

One row per authenticated device/client.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from session_vault.domain.base import utc_now

if TYPE_CHECKING:
    from .user import User


class Session(SQLModel, table=True):
    """
    Session entity - binds a token pair's validity window to one login.

    Business Rules:
    - Tokens are stored as SHA-256 digests, never in cleartext
    - Each signup/signin inserts a new row (multi-device)
    - Refresh rotates both digests and both expiries in place
    - Logout deletes the row; the expiry sweep deletes rows past refresh_expires_at
    """

    __tablename__ = "sessions"

    session_id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True)

    access_token_hash: str = Field(max_length=64)
    refresh_token_hash: str = Field(max_length=64, index=True)

    access_expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    refresh_expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    is_active: bool = Field(default=True)

    # Advisory only, never used for authorization
    device_info: Optional[str] = Field(default=None, max_length=512)
    ip_address: Optional[str] = Field(default=None, max_length=45)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    last_activity: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    user: Optional["User"] = Relationship(back_populates="sessions")

    __table_args__ = (
        Index("idx_session_refresh_expires_at", "refresh_expires_at"),
        Index("idx_session_user_active", "user_id", "is_active"),
    )
