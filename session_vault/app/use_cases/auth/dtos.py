"""
Authentication Use Case DTOs (Data Transfer Objects)

Command and Response classes for the auth domain.
Responses serialize with camelCase aliases to match the public wire format.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# ============================================================================
# Command DTOs
# ============================================================================


class CredentialsCommand(BaseModel):
    """
    Signup/signin command - validated login intent

    Created by API layer after request validation passes.
    device_info and ip_address are advisory and stored on the session row.
    """

    id: str
    password: str
    device_info: Optional[str] = None
    ip_address: Optional[str] = None


class SignupCommand(CredentialsCommand):
    """Register a new account and open its first session"""


class SigninCommand(CredentialsCommand):
    """Open an additional session for an existing account"""


# ============================================================================
# Response DTOs
# ============================================================================


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenPairResponse(CamelModel):
    """Response for signup, signin and refresh use cases"""

    access_token: str
    refresh_token: str
    access_token_expiry: str


class AuthContext(BaseModel):
    """Verified identity exposed to protected handlers"""

    user_id: str
    session_id: UUID


class LogoutResponse(CamelModel):
    """Response for logout use case"""

    message: str
    revoked: bool
