from sqlalchemy import update

from conftest import register_and_login
from fleetops.models.user import User, UserStatus


async def test_register_and_login(client):
    headers = await register_and_login(client, email="ops@example.com")

    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "ops@example.com"
    assert body["status"] == "active"


async def test_duplicate_registration_rejected(client):
    await register_and_login(client, email="ops@example.com")
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "ops@example.com", "password": "another1"},
    )
    assert response.status_code == 400


async def test_wrong_password_rejected(client):
    await register_and_login(client, email="ops@example.com", password="secret123")
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "ops@example.com", "password": "wrong-password"},
    )
    assert response.status_code == 401


async def test_fleet_routes_require_a_token(client):
    response = await client.get("/api/v1/vehicles")
    assert response.status_code == 401

    response = await client.get("/api/v1/vehicles", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_logout_revokes_token(client, auth_headers):
    response = await client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 401


async def test_refresh_tokens_are_single_use(client):
    await client.post("/api/v1/auth/register", json={"email": "ops@example.com", "password": "secret123"})
    login = await client.post("/api/v1/auth/login", json={"email": "ops@example.com", "password": "secret123"})
    refresh_token = login.json()["refresh_token"]

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 200
    new_access = response.json()["access_token"]

    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {new_access}"})
    assert response.status_code == 200

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert response.status_code == 401


async def test_access_token_cannot_refresh(client):
    await client.post("/api/v1/auth/register", json={"email": "ops@example.com", "password": "secret123"})
    login = await client.post("/api/v1/auth/login", json={"email": "ops@example.com", "password": "secret123"})

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": login.json()["access_token"]})
    assert response.status_code == 401


async def test_refresh_rejects_inactive_user(client, db_session):
    await client.post("/api/v1/auth/register", json={"email": "ops@example.com", "password": "secret123"})
    login = await client.post("/api/v1/auth/login", json={"email": "ops@example.com", "password": "secret123"})

    await db_session.execute(
        update(User).where(User.email == "ops@example.com").values(status=UserStatus.INACTIVE)
    )
    await db_session.commit()

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": login.json()["refresh_token"]})
    assert response.status_code == 403


async def test_change_password(client, auth_headers):
    response = await client.put(
        "/api/v1/auth/change-password",
        json={"current_password": "secret123", "new_password": "newsecret"},
        headers=auth_headers,
    )
    assert response.status_code == 200

    response = await client.post("/api/v1/auth/login", json={"email": "owner@example.com", "password": "secret123"})
    assert response.status_code == 401
    response = await client.post("/api/v1/auth/login", json={"email": "owner@example.com", "password": "newsecret"})
    assert response.status_code == 200


async def test_change_password_checks_current_and_length(client, auth_headers):
    response = await client.put(
        "/api/v1/auth/change-password",
        json={"current_password": "wrong-pass", "new_password": "newsecret"},
        headers=auth_headers,
    )
    assert response.status_code == 401

    response = await client.put(
        "/api/v1/auth/change-password",
        json={"current_password": "secret123", "new_password": "abc"},
        headers=auth_headers,
    )
    assert response.status_code == 400
