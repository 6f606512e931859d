import pytest
from httpx import AsyncClient

from tests.fixtures.auth_helpers import bearer, sessions_of, signup


@pytest.mark.asyncio
async def test_logout_revokes_access_token(client: AsyncClient, db_session):
    """After logout the old access token is rejected on protected routes"""
    tokens = await signup(client)

    response = await client.get("/logout", headers=bearer(tokens["accessToken"]))
    assert response.status_code == 200
    assert response.json()["revoked"] is True
    assert await sessions_of(db_session, "a@b.com") == []

    for path in ("/info", "/logout"):
        reuse = await client.get(path, headers=bearer(tokens["accessToken"]))
        assert reuse.status_code == 401
        assert reuse.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_logout_requires_authentication(client: AsyncClient):
    response = await client.get("/logout")

    assert response.status_code == 401
