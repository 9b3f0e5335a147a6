import os
import tempfile

# Settings are read at import time, so the environment must be ready first
_DB_DIR = tempfile.mkdtemp(prefix="agency-dashboard-tests-")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"

import pytest
from httpx import ASGITransport, AsyncClient

from agency_dashboard.database import Base, engine
from agency_dashboard.main import app, prepare_database

DEFAULT_PASSWORD = "secret1"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def fresh_db():
    """Every test starts from empty tables plus the provisioned admin."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await prepare_database()
    yield


@pytest.fixture
async def client(fresh_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def admin_headers(client):
    response = await client.post("/auth/login", json={"username": "admin", "password": "Admin@12345"})
    assert response.status_code == 200, response.text
    return bearer(response.json()["token"])


@pytest.fixture
def make_employee(client):
    async def _make(name, phone, department="Web", password=DEFAULT_PASSWORD):
        response = await client.post("/auth/register", json={
            "name": name,
            "phone": phone,
            "department": department,
            "password": password,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], bearer(body["token"])
    return _make


@pytest.fixture
def make_task(client):
    async def _make(headers, assigned_to, **overrides):
        payload = {
            "title": "Landing page refresh",
            "description": "Rework hero section and CTA",
            "department": "Web",
            "assignedTo": assigned_to,
            "deadline": "2030-12-31T00:00:00Z",
            "priority": "Medium",
        }
        payload.update(overrides)
        response = await client.post("/tasks", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["task"]
    return _make


@pytest.fixture
def set_status(client):
    async def _set(headers, task_id, status, **extra):
        response = await client.put(f"/tasks/{task_id}", json={"status": status, **extra}, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["task"]
    return _set


@pytest.fixture
def whoami(client):
    async def _me(headers):
        response = await client.get("/auth/me", headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["user"]
    return _me
