"""Administrative credential endpoints and the admin bearer gate."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from onetime_access.core.config import get_settings
from onetime_access.infrastructure.security.jwt import create_access_token
from tests.fakes import make_credential


class TestAdminGate:
    async def test_missing_token_is_401(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/one-time/credentials")
        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_ERROR"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_garbage_token_is_401(self, client: AsyncClient) -> None:
        response = await client.get(
            "/api/v1/one-time/credentials", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    async def test_expired_token_is_401(self, client: AsyncClient) -> None:
        token = create_access_token(
            {"sub": "op", "role": "admin"}, expires_delta=timedelta(seconds=-1)
        )
        response = await client.get(
            "/api/v1/one-time/credentials", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    async def test_non_admin_is_403(self, client: AsyncClient) -> None:
        token = create_access_token({"sub": "someone", "role": "viewer"})
        response = await client.get(
            "/api/v1/one-time/credentials", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"

    async def test_allowlisted_email_is_admin(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ADMIN_EMAILS", "ops@example.com, other@example.com")
        get_settings.cache_clear()
        try:
            token = create_access_token({"sub": "u1", "email": "Ops@Example.com"})
            response = await client.get(
                "/api/v1/one-time/credentials", headers={"Authorization": f"Bearer {token}"}
            )
            assert response.status_code == 200
        finally:
            monkeypatch.delenv("ADMIN_EMAILS")
            get_settings.cache_clear()

    async def test_public_endpoints_need_no_token(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/one-time/validate", json={})
        assert response.status_code == 200


class TestCredentialCrud:
    async def test_issue_then_login(self, client: AsyncClient, store, admin_headers) -> None:
        response = await client.post(
            "/api/v1/one-time/credentials",
            json={"username": "visitor", "password": "pw", "durationHours": 2},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"id", "username", "durationHours", "createdAt"}
        assert data["username"] == "visitor"
        assert data["durationHours"] == 2
        assert data["createdAt"] == "2025-01-15T12:00:00.000Z"

        login = await client.post(
            "/api/v1/one-time/login", json={"username": "visitor", "password": "pw"}
        )
        assert login.status_code == 200

    async def test_issue_missing_fields(self, client: AsyncClient, store, admin_headers) -> None:
        response = await client.post(
            "/api/v1/one-time/credentials",
            json={"username": "visitor", "durationHours": 0},
            headers=admin_headers,
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Missing fields"
        assert body["details"]["fields"] == ["password", "durationHours"]
        assert store.records == {}

    async def test_list_and_get_hide_secrets(
        self, client: AsyncClient, store, admin_headers
    ) -> None:
        store.add(make_credential())
        await client.post(
            "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
        )

        listing = await client.get("/api/v1/one-time/credentials", headers=admin_headers)
        assert listing.status_code == 200
        items = listing.json()["items"]
        assert len(items) == 1
        item = items[0]
        assert item["state"] == "active"
        assert item["usedAt"] == "2025-01-15T12:00:00.000Z"
        assert "passwordHash" not in item
        assert "sessionToken" not in item

        single = await client.get("/api/v1/one-time/credentials/cred-a", headers=admin_headers)
        assert single.status_code == 200
        assert single.json() == item

        missing = await client.get("/api/v1/one-time/credentials/nope", headers=admin_headers)
        assert missing.status_code == 404

    async def test_update(self, client: AsyncClient, store, admin_headers) -> None:
        store.add(make_credential())
        response = await client.put(
            "/api/v1/one-time/credentials/cred-a",
            json={"username": "guest", "password": "fresh", "durationHours": 8},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert store.records["cred-a"].duration_hours == 8

        login = await client.post(
            "/api/v1/one-time/login", json={"username": "guest", "password": "fresh"}
        )
        assert login.json()["expiresAt"] == "2025-01-15T20:00:00.000Z"

    async def test_update_unknown_is_404(self, client: AsyncClient, admin_headers) -> None:
        response = await client.put(
            "/api/v1/one-time/credentials/nope",
            json={"username": "u", "password": "p", "durationHours": 1},
            headers=admin_headers,
        )
        assert response.status_code == 404

    async def test_revoke_kills_session(self, client: AsyncClient, store, admin_headers) -> None:
        store.add(make_credential())
        login = await client.post(
            "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
        )
        token = login.json()["token"]

        response = await client.delete(
            "/api/v1/one-time/credentials/cred-a", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        check = await client.post("/api/v1/one-time/validate", json={"token": token})
        assert check.json() == {"active": False}

        again = await client.delete("/api/v1/one-time/credentials/cred-a", headers=admin_headers)
        assert again.status_code == 200
