from datetime import timedelta

import pytest
from jose import jwt

from agency_dashboard.config import load_settings
from agency_dashboard.errors import ConfigurationError
from agency_dashboard.utils.security import create_access_token
from conftest import DEFAULT_PASSWORD, bearer


async def test_register_then_login_by_name(client, make_employee):
    user, _ = await make_employee("Alice", "555")
    assert user["role"] == "employee"
    assert user["department"] == "Web"
    assert user["points"] == 0
    assert "hashedPassword" not in user

    response = await client.post("/auth/login", json={"username": "Alice", "password": DEFAULT_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["user"]["id"] == user["id"]
    assert body["user"]["lastLogin"] is not None


async def test_login_by_phone(client, make_employee):
    user, _ = await make_employee("Alice", "555")
    response = await client.post("/auth/login", json={"username": "555", "password": DEFAULT_PASSWORD})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == user["id"]


async def test_login_wrong_password(client, make_employee):
    await make_employee("Alice", "555")
    response = await client.post("/auth/login", json={"username": "Alice", "password": "nope-nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


async def test_login_unknown_user(client):
    response = await client.post("/auth/login", json={"username": "ghost", "password": "whatever"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"


async def test_register_duplicate_phone(client, make_employee):
    await make_employee("Alice", "555")
    response = await client.post("/auth/register", json={
        "name": "Another Alice", "phone": "555", "department": "SEO", "password": "secret1",
    })
    assert response.status_code == 400
    assert response.json()["error"] == "User already exists with this phone number"


@pytest.mark.parametrize("payload", [
    {"name": "Bob", "phone": "777", "department": "Admin", "password": "secret1"},
    {"name": "Bob", "phone": "777", "department": "Marketing", "password": "secret1"},
    {"name": "Bob", "phone": "777", "department": "Web", "password": "123"},
    {"name": "B", "phone": "777", "department": "Web", "password": "secret1"},
])
async def test_register_rejects_invalid_payloads(client, payload):
    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 400
    assert "error" in response.json()


async def test_register_strips_markup_from_name(client, make_employee):
    user, _ = await make_employee("  <b>Carol</b> ", "888")
    assert user["name"] == "Carol"


async def test_admin_login_is_case_insensitive(client):
    response = await client.post("/auth/login", json={"username": "ADMIN", "password": "Admin@12345"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Admin login successful"
    assert body["user"]["role"] == "admin"
    assert body["user"]["department"] == "Admin"


async def test_me_returns_caller(make_employee, whoami):
    user, headers = await make_employee("Alice", "555", department="SEO")
    me = await whoami(headers)
    assert me["id"] == user["id"]
    assert me["department"] == "SEO"


async def test_missing_token(client):
    response = await client.get("/auth/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Access denied. No token provided."}


async def test_garbage_token(client):
    response = await client.get("/auth/me", headers=bearer("not-a-jwt"))
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token."}


async def test_token_signed_with_other_secret(client, make_employee):
    user, _ = await make_employee("Alice", "555")
    forged = jwt.encode({"sub": str(user["id"])}, "someone-else", algorithm="HS256")
    response = await client.get("/auth/me", headers=bearer(forged))
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token."}


async def test_expired_token(client, make_employee):
    user, _ = await make_employee("Alice", "555")
    token = create_access_token({"sub": str(user["id"])}, expires_delta=timedelta(minutes=-5))
    response = await client.get("/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.json() == {"error": "Token expired. Please login again."}


async def test_token_for_unknown_user(client):
    token = create_access_token({"sub": "424242"})
    response = await client.get("/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.json() == {"error": "User not found. Token is not valid."}


async def test_token_without_subject(client):
    token = create_access_token({"role": "employee"})
    response = await client.get("/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid token."}


async def test_legacy_admin_subject_resolves_to_admin(client, whoami):
    token = create_access_token({"sub": "admin-user", "role": "admin"})
    me = await whoami(bearer(token))
    assert me["name"] == "Admin"
    assert me["role"] == "admin"
    assert me["department"] == "Admin"
    assert me["points"] == 0
    assert me["completedTasks"] == 0
    assert me["streak"] == 0


async def test_admin_guard_rejects_employee(client, make_employee):
    _, headers = await make_employee("Alice", "555")
    response = await client.get("/users", headers=headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. Admin rights required."}


def test_settings_require_signing_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ConfigurationError):
        load_settings(_env_file=None)


def test_settings_load_with_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "abc")
    loaded = load_settings(_env_file=None)
    assert loaded.JWT_SECRET == "abc"
    assert loaded.ACCESS_TOKEN_EXPIRE_MINUTES == 60 * 24 * 7


async def test_profile_rename_relabels_tasks(client, make_employee, make_task, admin_headers):
    _, headers = await make_employee("Alice", "555")
    task = await make_task(admin_headers, "Alice")
    assert task["assignedTo"] == "Alice"

    response = await client.put("/auth/profile", json={"name": "Alicia"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Alicia"

    response = await client.get(f"/tasks/{task['id']}", headers=admin_headers)
    assert response.json()["assignedTo"] == "Alicia"


async def test_employee_cannot_change_own_department(client, make_employee):
    _, headers = await make_employee("Alice", "555")
    response = await client.put("/auth/profile", json={"department": "HR"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["user"]["department"] == "Web"


async def test_admin_can_change_own_department(client, admin_headers):
    response = await client.put("/auth/profile", json={"department": "HR"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["user"]["department"] == "HR"


async def test_profile_picture_update(client, make_employee):
    _, headers = await make_employee("Alice", "555")
    picture = "data:image/png;base64,iVBORw0KGgo="
    response = await client.put("/auth/profile-picture", json={"profilePicture": picture}, headers=headers)
    assert response.status_code == 200
    assert response.json()["user"]["profilePicture"] == picture


@pytest.mark.parametrize("picture, message", [
    ("", "Profile picture data is required"),
    ("https://example.com/me.png", "Invalid image format. Must be a base64 encoded image"),
    ("data:image/png;base64," + "A" * 6_670_000, "Image too large. Maximum size is 5MB"),
])
async def test_profile_picture_rejected(client, make_employee, picture, message):
    _, headers = await make_employee("Alice", "555")
    response = await client.put("/auth/profile-picture", json={"profilePicture": picture}, headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == message
