"""
User Entity

Account owner identified by email address or E.164 phone number.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from session_vault.domain.base import utc_now

if TYPE_CHECKING:
    from .session import Session


class User(SQLModel, table=True):
    """
    User entity - the login identity.

    Business Rules:
    - id is the login identifier itself (email or phone), unique by construction
    - Password stored as bcrypt hash
    - Never deleted by the session core
    """

    __tablename__ = "users"

    id: str = Field(primary_key=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    sessions: list["Session"] = Relationship(back_populates="user")
