import pytest
from httpx import AsyncClient

from session_vault.adapter.repositories.user_repository import UserRepository
from session_vault.api.utils.crypto import hash_token
from tests.fixtures.auth_helpers import bearer, sessions_of, signup


@pytest.mark.asyncio
async def test_signup_then_info(client: AsyncClient):
    """Signup returns a usable token pair and /info echoes the identity"""
    response = await client.post("/signup", json={"id": "a@b.com", "password": "secret1"})

    assert response.status_code == 201
    data = response.json()
    assert data["accessToken"]
    assert data["refreshToken"]
    assert data["accessTokenExpiry"] == "10m"

    info = await client.get("/info", headers=bearer(data["accessToken"]))
    assert info.status_code == 200
    assert info.json() == {"id": "a@b.com"}


@pytest.mark.asyncio
async def test_signup_creates_exactly_one_session(client: AsyncClient, db_session):
    data = await signup(client)

    sessions = await sessions_of(db_session, "a@b.com")
    assert len(sessions) == 1
    session = sessions[0]
    assert session.is_active is True
    assert session.access_token_hash == hash_token(data["accessToken"])
    assert session.refresh_token_hash == hash_token(data["refreshToken"])
    # Raw tokens are never stored
    assert session.refresh_token_hash != data["refreshToken"]
    assert session.access_expires_at < session.refresh_expires_at


@pytest.mark.asyncio
async def test_signup_with_phone_number(client: AsyncClient):
    response = await client.post(
        "/signup", json={"id": "+15551234567", "password": "secret1"}
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_signup_duplicate_id(client: AsyncClient):
    await signup(client)

    response = await client.post("/signup", json={"id": "a@b.com", "password": "other12"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USER_EXISTS"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"id": "not-an-id", "password": "secret1"},
        {"id": "+0123", "password": "secret1"},
        {"id": "a@b.com", "password": "123"},
        {"id": "a@b.com"},
    ],
)
async def test_signup_validation_error(client: AsyncClient, payload):
    response = await client.post("/signup", json=payload)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_signup_concurrent_duplicate_id(client: AsyncClient, db_session, monkeypatch):
    """A signup that misses the existing user on lookup gets 409, not a 500"""
    await signup(client)

    async def lookup_misses(self, user_id):
        return None

    db_session.expunge_all()
    monkeypatch.setattr(UserRepository, "get_by_id", lookup_misses)

    response = await client.post("/signup", json={"id": "a@b.com", "password": "other12"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USER_EXISTS"
    assert len(await sessions_of(db_session, "a@b.com")) == 1


@pytest.mark.asyncio
async def test_signup_long_user_agent_is_truncated(client: AsyncClient, db_session):
    await client.post(
        "/signup",
        json={"id": "a@b.com", "password": "secret1"},
        headers={"User-Agent": "x" * 2000},
    )

    session = (await sessions_of(db_session, "a@b.com"))[0]
    assert session.device_info == "x" * 512
