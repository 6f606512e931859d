from functools import lru_cache

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from session_vault.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from session_vault.api.error import ClientError, ServerError
from session_vault.api.utils.duration import parse_duration
from session_vault.api.utils.jwt import TokenCodec
from session_vault.app.services.password_hasher import PasswordHasher
from session_vault.app.services.unit_of_work import UnitOfWork
from session_vault.app.use_cases.auth import (
    AuthContext,
    AuthenticateUseCase,
    SessionIssuer,
)
from session_vault.domain import entities  # noqa: F401  registers tables on SQLModel.metadata
from session_vault.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_token_codec() -> TokenCodec:
    return TokenCodec(
        ApplicationConfig.JWT_ACCESS_SECRET,
        parse_duration(ApplicationConfig.JWT_ACCESS_EXPIRY),
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


def get_session_issuer(codec: TokenCodec = Depends(get_token_codec)) -> SessionIssuer:
    return SessionIssuer(
        codec,
        refresh_ttl=parse_duration(ApplicationConfig.JWT_REFRESH_EXPIRY),
        access_expiry_label=ApplicationConfig.JWT_ACCESS_EXPIRY,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthContext:
    """
    Dependency guarding every protected route.

    Verifies the bearer token signature, then checks that the session it
    references is still active and unexpired in the database.

    Returns:
        AuthContext with user_id and session_id

    Raises:
        ClientError: 401 UNAUTHORIZED or TOKEN_EXPIRED
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHORIZED", "No token provided"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await AuthenticateUseCase(uow, codec).execute(credentials.credentials)

    if result.is_err():
        error = result.error
        if error.code in ("UNAUTHORIZED", "TOKEN_EXPIRED"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value
