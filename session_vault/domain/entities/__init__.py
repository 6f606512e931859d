"""
Session Vault Domain Entities

Each entity in its own file.
"""

from .user import User
from .session import Session

__all__ = [
    "User",
    "Session",
]
