"""Tests for journalmate.routers.auth: registration, login, tokens and profile."""

from journalmate.core.security import create_refresh_token


class TestRegister:
    async def test_register_returns_user(self, client):
        resp = await client.post(
            "/auth/register",
            json={"username": "alice", "email": "alice@example.com", "password": "s3cret-pass", "first_name": "Alice"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["username"] == "alice"
        assert body["first_name"] == "Alice"
        assert body["timezone"] == "UTC"
        assert "hashed_password" not in body

    async def test_duplicate_username_conflicts(self, client, register):
        await register("alice")
        resp = await client.post("/auth/register", json={"username": "alice", "password": "another-pass"})
        assert resp.status_code == 409

    async def test_duplicate_email_conflicts(self, client, register):
        await register("alice", email="a@example.com")
        resp = await client.post(
            "/auth/register", json={"username": "bob", "email": "a@example.com", "password": "another-pass"}
        )
        assert resp.status_code == 409

    async def test_short_password_rejected(self, client):
        resp = await client.post("/auth/register", json={"username": "alice", "password": "short"})
        assert resp.status_code == 422


class TestLogin:
    async def test_login_with_email(self, client, register):
        await register("alice", email="alice@example.com")
        resp = await client.post("/auth/login", json={"username": "alice@example.com", "password": "s3cret-pass"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "alice"

    async def test_wrong_password(self, client, register):
        await register("alice")
        resp = await client.post("/auth/login", json={"username": "alice", "password": "wrong-pass"})
        assert resp.status_code == 401

    async def test_unknown_user(self, client):
        resp = await client.post("/auth/login", json={"username": "nobody", "password": "whatever1"})
        assert resp.status_code == 401


class TestTokens:
    async def test_me_requires_token(self, client):
        resp = await client.get("/auth/me")
        assert resp.status_code in (401, 403)

    async def test_refresh_issues_access_token(self, client, register):
        await register("alice")
        login = await client.post("/auth/login", json={"username": "alice", "password": "s3cret-pass"})
        resp = await client.post("/auth/refresh", json={"refresh_token": login.json()["refresh_token"]})
        assert resp.status_code == 200

        me = await client.get("/auth/me", headers={"Authorization": f"Bearer {resp.json()['access_token']}"})
        assert me.status_code == 200
        assert me.json()["username"] == "alice"

    async def test_refresh_token_is_not_an_access_token(self, client, register):
        user, _ = await register("alice")
        refresh = create_refresh_token({"sub": user["id"]})
        resp = await client.get("/auth/me", headers={"Authorization": f"Bearer {refresh}"})
        assert resp.status_code == 401

    async def test_access_token_cannot_refresh(self, client, register):
        _, headers = await register("alice")
        access = headers["Authorization"].split(" ", 1)[1]
        resp = await client.post("/auth/refresh", json={"refresh_token": access})
        assert resp.status_code == 401

    async def test_garbage_refresh_token(self, client):
        resp = await client.post("/auth/refresh", json={"refresh_token": "not-a-jwt"})
        assert resp.status_code == 401


class TestProfile:
    async def test_update_profile(self, client, auth):
        resp = await client.patch(
            "/auth/me", headers=auth, json={"first_name": "Al", "timezone": "Europe/Berlin"}
        )
        assert resp.status_code == 200
        assert resp.json()["first_name"] == "Al"
        assert resp.json()["timezone"] == "Europe/Berlin"

    async def test_unknown_timezone_rejected(self, client, auth):
        resp = await client.patch("/auth/me", headers=auth, json={"timezone": "Mars/Olympus"})
        assert resp.status_code == 400

    async def test_change_password(self, client, auth):
        resp = await client.post(
            "/auth/change-password", headers=auth,
            json={"current_password": "s3cret-pass", "new_password": "even-better-pass"},
        )
        assert resp.status_code == 200

        login = await client.post("/auth/login", json={"username": "alice", "password": "even-better-pass"})
        assert login.status_code == 200

    async def test_change_password_wrong_current(self, client, auth):
        resp = await client.post(
            "/auth/change-password", headers=auth,
            json={"current_password": "nope-nope", "new_password": "even-better-pass"},
        )
        assert resp.status_code == 400

    async def test_change_password_reuse_refused(self, client, auth):
        resp = await client.post(
            "/auth/change-password", headers=auth,
            json={"current_password": "s3cret-pass", "new_password": "s3cret-pass"},
        )
        assert resp.status_code == 400
