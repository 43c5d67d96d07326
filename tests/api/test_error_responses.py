"""Error bodies produced by the exception handlers."""

from httpx import ASGITransport, AsyncClient

from onetime_access.api.v1.dependencies import get_one_time_access_service
from onetime_access.main import app


class _BrokenService:
    async def login(self, username, password):
        raise RuntimeError("database exploded")


async def test_unexpected_error_is_500_with_request_id() -> None:
    app.dependency_overrides[get_one_time_access_service] = lambda: _BrokenService()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post(
                "/api/v1/one-time/login",
                json={"username": "guest", "password": "s3cret"},
                headers={"X-Request-ID": "req-500"},
            )
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {
        "error": "INTERNAL_ERROR",
        "message": "Internal server error",
        "details": {"request_id": "req-500"},
    }


async def test_store_outage_is_500_store_unavailable(client, store) -> None:
    store.fail = True
    resp = await client.post(
        "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
    )
    assert resp.status_code == 500
    assert resp.json()["error"] == "STORE_UNAVAILABLE"


async def test_admin_gate_sends_bearer_challenge(client) -> None:
    resp = await client.get("/api/v1/one-time/credentials")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"
