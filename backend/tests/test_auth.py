from jose import jwt

from velvet_routes.config import settings


async def test_register_returns_user_and_token(client):
    resp = await client.post(
        "/api/users/register", json={"name": "Asha", "email": "A@x.com", "password": "secret1"}
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["searchHistory"] == []
    assert body["user"]["bookings"] == []
    assert "passwordHash" not in body["user"]


async def test_login_returns_same_user(client, register):
    user, _ = await register()
    resp = await client.post("/api/users/login", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user["id"]


async def test_login_wrong_password(client, register):
    await register()
    resp = await client.post("/api/users/login", json={"email": "a@x.com", "password": "nope123"})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "Invalid credentials"}


async def test_duplicate_email_rejected(client, register):
    await register()
    resp = await client.post(
        "/api/users/register", json={"name": "Other", "email": "a@x.com", "password": "secret2"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "User already exists"


async def test_register_validation(client):
    resp = await client.post(
        "/api/users/register", json={"name": "Asha", "email": "not-an-email", "password": "secret1"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    resp = await client.post(
        "/api/users/register", json={"name": "Asha", "email": "a@x.com", "password": "123"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Password must be at least 6 characters"

    resp = await client.post("/api/users/register", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 400


async def test_profile_requires_token(client):
    resp = await client.get("/api/users/profile")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Access token required"


async def test_profile_rejects_bad_token(client):
    resp = await client.get("/api/users/profile", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 403
    assert resp.json()["error"] == "Invalid token"


async def test_profile_rejects_token_for_unknown_user(client):
    token = jwt.encode(
        {"sub": "00000000-0000-0000-0000-000000000000"}, settings.secret_key, algorithm=settings.algorithm
    )
    resp = await client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "User not found"


async def test_profile(client, register):
    user, headers = await register()
    resp = await client.get("/api/users/profile", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user["id"]
