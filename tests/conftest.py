import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import AsyncClient, ASGITransport

from fleetops.database import engine, Base, AsyncSessionLocal
from fleetops import models  # noqa: F401
from fleetops.main import app


@pytest.fixture(autouse=True)
async def setup_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    # next test opens a fresh in-memory connection on its own loop
    await engine.dispose()


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with AsyncSessionLocal() as session:
        yield session


async def register_and_login(client, email="owner@example.com", password="secret123"):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "full_name": "Fleet Owner"},
    )
    assert response.status_code == 201, response.text
    response = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client):
    return await register_and_login(client)


async def create_vehicle(client, headers, **overrides):
    payload = {"license_plate": "MH12AB1234", "vehicle_owner": "Sharma Transport", "fuel_type": "Diesel"}
    payload.update(overrides)
    response = await client.post("/api/v1/vehicles", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_driver(client, headers, **overrides):
    payload = {"first_name": "Ramesh", "last_name": "Kumar", "phone": "9876543210", "license_number": "DL-001"}
    payload.update(overrides)
    response = await client.post("/api/v1/drivers", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
