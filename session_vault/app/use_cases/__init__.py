"""
Use Cases

Organized into domain folders:
- auth/: Session lifecycle and request authentication
- sessions/: Session maintenance
"""

from .auth import (
    AuthenticateUseCase,
    LogoutUseCase,
    RefreshTokenUseCase,
    SigninUseCase,
    SignupUseCase,
)
from .sessions import PurgeExpiredSessionsUseCase

__all__ = [
    # Auth
    "SignupUseCase",
    "SigninUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "AuthenticateUseCase",
    # Sessions
    "PurgeExpiredSessionsUseCase",
]
