import re

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email

from session_vault.api.error import ClientError, ServerError
from session_vault.app.services.password_hasher import PasswordHasher
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.app.use_cases.auth import (
    AuthContext,
    LogoutResponse,
    LogoutUseCase,
    RefreshTokenUseCase,
    SessionIssuer,
    SigninCommand,
    SigninUseCase,
    SignupCommand,
    SignupUseCase,
    TokenPairResponse,
)
from session_vault.depends import (
    get_current_user,
    get_password_hasher,
    get_session_issuer,
    get_unit_of_work,
)

router = APIRouter(tags=["Authentication"])

PHONE_RE = re.compile(r"^\+[1-9]\d{1,14}$")
DEVICE_INFO_MAX_LENGTH = 512


class CredentialsRequest(BaseModel):
    """
    Signup/signin HTTP request payload

    id is an email address or an E.164 phone number.
    """

    id: str = Field(..., max_length=255, description="Email or phone (E.164)")
    password: str = Field(..., min_length=6, max_length=128, description="Password")

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        value = value.strip()
        if value.startswith("+"):
            if not PHONE_RE.match(value):
                raise ValueError("id must be an email address or an E.164 phone number")
            return value
        return validate_email(value)[1]


class RefreshRequest(BaseModel):
    """Refresh token HTTP request payload"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    refresh_token: str = Field(..., min_length=1, description="Refresh token")


class InfoResponse(BaseModel):
    """GET /info response payload"""

    id: str


def _client_metadata(request: Request) -> dict:
    user_agent = request.headers.get("user-agent")
    return {
        "device_info": user_agent[:DEVICE_INFO_MAX_LENGTH] if user_agent else None,
        "ip_address": request.client.host if request.client else None,
    }


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=TokenPairResponse
)
async def signup(
    body: CredentialsRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    User Signup

    Creates the account and signs the user in on the calling device.

    Raises:
        - 409 Conflict: USER_EXISTS
        - 422 Unprocessable Entity: VALIDATION_ERROR
        - 500 Internal Server Error: Server error
    """
    command = SignupCommand(id=body.id, password=body.password, **_client_metadata(request))

    use_case = SignupUseCase(uow, issuer, hasher)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "USER_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.post("/signin", status_code=status.HTTP_200_OK, response_model=TokenPairResponse)
async def signin(
    body: CredentialsRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    User Signin

    Opens a new session; sessions on other devices are not affected.

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS
        - 500 Internal Server Error: Server error
    """
    command = SigninCommand(id=body.id, password=body.password, **_client_metadata(request))

    use_case = SigninUseCase(uow, issuer, hasher)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.post(
    "/signin/new_token", status_code=status.HTTP_200_OK, response_model=TokenPairResponse
)
async def new_token(
    body: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Refresh Token Pair

    Single-use rotation: the submitted refresh token stops working.

    Raises:
        - 401 Unauthorized: TOKEN_EXPIRED (unknown, reused or expired token)
        - 500 Internal Server Error: Server error
    """
    use_case = RefreshTokenUseCase(uow, issuer)
    result = await use_case.execute(body.refresh_token)

    if result.is_err():
        error = result.error
        if error.code == "TOKEN_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.get("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    current_user: AuthContext = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout Current Session

    Deletes only the session bound to the presented access token.

    Raises:
        - 401 Unauthorized: Invalid or expired access token
        - 500 Internal Server Error: Server error
    """
    use_case = LogoutUseCase(uow)
    result = await use_case.execute(current_user.session_id, current_user.user_id)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/info", status_code=status.HTTP_200_OK, response_model=InfoResponse)
async def info(current_user: AuthContext = Depends(get_current_user)):
    """
    Current User Info

    Reads the verified identity only; no database access beyond the guard.
    """
    return InfoResponse(id=current_user.user_id)
