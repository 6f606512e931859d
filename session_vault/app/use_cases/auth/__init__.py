"""
Authentication Use Cases

Session lifecycle: issue, rotate, revoke, and the per-request guard.
"""

from .session_issuer import SessionIssuer
from .signup_use_case import SignupUseCase
from .signin_use_case import SigninUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .authenticate_use_case import AuthenticateUseCase
from .dtos import (
    AuthContext,
    LogoutResponse,
    SigninCommand,
    SignupCommand,
    TokenPairResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "SigninUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "AuthenticateUseCase",
    # Services
    "SessionIssuer",
    # DTOs - Commands
    "SignupCommand",
    "SigninCommand",
    # DTOs - Responses
    "TokenPairResponse",
    "LogoutResponse",
    "AuthContext",
]
