"""
Integration tests for Authentication Flow.

Verifies Register -> Login -> Me -> Logout, and that sign-out revokes the
token immediately.
"""

import pytest


@pytest.mark.asyncio
async def test_register_returns_token(client):
    response = await client.post("/v1/auth/register", json={
        "email": "owner@test.com",
        "username": "owner",
        "password": "password123",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["username"] == "owner"
    assert data["access_token"]


@pytest.mark.asyncio
async def test_duplicate_username_rejected(client, auth_headers):
    response = await client.post("/v1/auth/register", json={
        "email": "another@test.com",
        "username": "alice",
        "password": "password123",
    })

    assert response.status_code == 400
    assert response.json()["message"] == "Username already registered"


@pytest.mark.asyncio
async def test_duplicate_email_rejected(client, auth_headers):
    response = await client.post("/v1/auth/register", json={
        "email": "alice@test.com",
        "username": "alice2",
        "password": "password123",
    })

    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


@pytest.mark.asyncio
async def test_login_with_username_or_email(client, auth_headers):
    for identifier in ("alice", "alice@test.com"):
        response = await client.post("/v1/auth/login", json={
            "username": identifier,
            "password": "password123",
        })
        assert response.status_code == 200
        assert response.json()["email"] == "alice@test.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client, auth_headers):
    response = await client.post("/v1/auth/login", json={
        "username": "alice",
        "password": "wrong-password",
    })

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_UNAUTHORIZED"


@pytest.mark.asyncio
async def test_me(client, auth_headers):
    response = await client.get("/v1/auth/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "alice"
    assert data["is_active"] is True


@pytest.mark.asyncio
async def test_missing_token_rejected(client):
    response = await client.get("/v1/clients")
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_garbage_token_rejected(client):
    response = await client.get("/v1/clients", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token(client, auth_headers, redis_client_session):
    response = await client.post("/v1/auth/logout", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "success"
    assert any(key.startswith("blacklist:token:") for key in redis_client_session.store)

    me_response = await client.get("/v1/auth/me", headers=auth_headers)
    assert me_response.status_code == 401
    assert me_response.json()["message"] == "Token has been revoked"


@pytest.mark.asyncio
async def test_logout_fails_when_redis_fails(client, auth_headers, mocker, redis_client_session):
    mocker.patch.object(redis_client_session, "setex", side_effect=ConnectionError("redis down"))

    response = await client.post("/v1/auth/logout", headers=auth_headers)

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["redis"] == "up"
    assert "X-Correlation-ID" in response.headers
