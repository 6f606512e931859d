from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from session_vault.adapter.repositories.session_repository import SessionRepository
from session_vault.api.utils.crypto import hash_token
from session_vault.app.repositories.session_repository import SessionTokens
from session_vault.domain.base import utc_now
from tests.fixtures.auth_helpers import bearer, sessions_of, signup


@pytest.mark.asyncio
async def test_successful_token_refresh(client: AsyncClient, db_session):
    """Rotation returns a new pair bound to the same session"""
    old = await signup(client)
    session_id = (await sessions_of(db_session, "a@b.com"))[0].session_id

    response = await client.post(
        "/signin/new_token", json={"refreshToken": old["refreshToken"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["accessToken"] != old["accessToken"]
    assert data["refreshToken"] != old["refreshToken"]

    sessions = await sessions_of(db_session, "a@b.com")
    assert len(sessions) == 1
    assert sessions[0].session_id == session_id
    assert sessions[0].refresh_token_hash == hash_token(data["refreshToken"])
    assert sessions[0].access_token_hash == hash_token(data["accessToken"])

    info = await client.get("/info", headers=bearer(data["accessToken"]))
    assert info.status_code == 200


@pytest.mark.asyncio
async def test_refresh_token_is_single_use(client: AsyncClient):
    """Replaying a rotated refresh token fails even though it has not expired"""
    old = await signup(client)

    first = await client.post("/signin/new_token", json={"refreshToken": old["refreshToken"]})
    assert first.status_code == 200

    replay = await client.post("/signin/new_token", json={"refreshToken": old["refreshToken"]})
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "TOKEN_EXPIRED"

    # The successor keeps working
    second = await client.post(
        "/signin/new_token", json={"refreshToken": first.json()["refreshToken"]}
    )
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_refresh_with_unknown_token(client: AsyncClient):
    response = await client.post("/signin/new_token", json={"refreshToken": "f" * 80})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_refresh_with_expired_token(client: AsyncClient, db_session):
    tokens = await signup(client)

    session = (await sessions_of(db_session, "a@b.com"))[0]
    session.refresh_expires_at = utc_now() - timedelta(days=1)
    db_session.add(session)
    await db_session.commit()

    response = await client.post(
        "/signin/new_token", json={"refreshToken": tokens["refreshToken"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_refresh_after_logout(client: AsyncClient):
    tokens = await signup(client)
    await client.get("/logout", headers=bearer(tokens["accessToken"]))

    response = await client.post(
        "/signin/new_token", json={"refreshToken": tokens["refreshToken"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_refresh_missing_body_field(client: AsyncClient):
    response = await client.post("/signin/new_token", json={})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def _replacement_tokens(now) -> SessionTokens:
    return SessionTokens(
        access_token_hash=hash_token("replacement-access"),
        refresh_token_hash=hash_token("replacement-refresh"),
        access_expires_at=now + timedelta(minutes=10),
        refresh_expires_at=now + timedelta(days=7),
    )


@pytest.mark.asyncio
async def test_conditional_update_with_stale_digest(client: AsyncClient, db_session):
    """The rotation write matches nothing once the expected digest is gone"""
    tokens = await signup(client)
    session = (await sessions_of(db_session, "a@b.com"))[0]
    session_id = session.session_id
    repository = SessionRepository(db_session)

    updated = await repository.update(
        session_id,
        _replacement_tokens(utc_now()),
        expected_refresh_token_hash=hash_token("not-the-current-token"),
    )
    await db_session.commit()

    assert updated is False
    db_session.expunge_all()
    stored = (await sessions_of(db_session, "a@b.com"))[0]
    assert stored.refresh_token_hash == hash_token(tokens["refreshToken"])
    assert stored.access_token_hash == hash_token(tokens["accessToken"])

    updated = await repository.update(
        session_id,
        _replacement_tokens(utc_now()),
        expected_refresh_token_hash=hash_token(tokens["refreshToken"]),
    )
    await db_session.commit()

    assert updated is True


@pytest.mark.asyncio
async def test_interleaved_rotation_has_one_winner(client: AsyncClient, engine):
    """Two connections that both read the old digest cannot both rotate it"""
    tokens = await signup(client)
    old_digest = hash_token(tokens["refreshToken"])
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as first, factory() as second:
        first_row = await SessionRepository(first).find_by_refresh_token_hash(old_digest)
        second_row = await SessionRepository(second).find_by_refresh_token_hash(old_digest)
        assert first_row is not None and second_row is not None

        won = await SessionRepository(first).update(
            first_row.session_id,
            _replacement_tokens(utc_now()),
            expected_refresh_token_hash=old_digest,
        )
        await first.commit()

        lost = await SessionRepository(second).update(
            second_row.session_id,
            _replacement_tokens(utc_now()),
            expected_refresh_token_hash=old_digest,
        )
        await second.commit()

    assert won is True
    assert lost is False

