from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from session_vault.api.utils.jwt import TokenCodec
from session_vault.app.services.password_hasher import PasswordHasher
from session_vault.app.use_cases.auth import SessionIssuer

ACCESS_SECRET = "unit-test-access-secret-0123456789abcdef"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.create = AsyncMock()

    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock()
    uow.sessions.find_by_refresh_token_hash = AsyncMock()
    uow.sessions.find_by_session_id = AsyncMock()
    uow.sessions.update = AsyncMock(return_value=True)
    uow.sessions.delete_by_session_id = AsyncMock(return_value=True)
    uow.sessions.delete_expired = AsyncMock(return_value=0)
    return uow


@pytest.fixture
def codec():
    return TokenCodec(ACCESS_SECRET, timedelta(minutes=10))


@pytest.fixture
def issuer(codec):
    return SessionIssuer(codec, refresh_ttl=timedelta(days=7), access_expiry_label="10m")


@pytest.fixture(scope="session")
def hasher():
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)
