"""Per-address rate limits, exercised with the limiter switched back on."""

import pytest
from httpx import AsyncClient

from onetime_access.core.limiter import limiter
from tests.fakes import make_credential


@pytest.fixture
def limits_on():
    limiter.enabled = True
    limiter.reset()
    yield
    limiter.reset()


async def test_eleventh_login_in_a_minute_is_rate_limited(
    client: AsyncClient, limits_on
) -> None:
    body = {"username": "nobody", "password": "guess"}
    statuses = [
        (await client.post("/api/v1/one-time/login", json=body)).status_code
        for _ in range(10)
    ]
    assert statuses == [404] * 10

    response = await client.post("/api/v1/one-time/login", json=body)
    assert response.status_code == 429
    assert response.json() == {
        "error": "RATE_LIMITED",
        "message": "Rate limit exceeded: 10 per 1 minute",
        "details": {"limit": "10 per 1 minute"},
    }


async def test_throttled_validate_reads_inactive(
    client: AsyncClient, store, limits_on
) -> None:
    store.add(make_credential())
    login = await client.post(
        "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
    )
    token = login.json()["token"]

    for _ in range(120):
        response = await client.post("/api/v1/one-time/validate", json={"token": token})
        assert response.status_code == 200
        assert response.json()["active"] is True

    throttled = await client.post("/api/v1/one-time/validate", json={"token": token})
    assert throttled.status_code == 200
    assert throttled.json() == {"active": False}
    assert throttled.headers["cache-control"] == "no-store"


async def test_admin_writes_are_rate_limited(
    client: AsyncClient, admin_headers, limits_on
) -> None:
    for _ in range(60):
        response = await client.post(
            "/api/v1/one-time/credentials", json={}, headers=admin_headers
        )
        assert response.status_code == 400

    response = await client.post(
        "/api/v1/one-time/credentials", json={}, headers=admin_headers
    )
    assert response.status_code == 429
    assert response.json()["error"] == "RATE_LIMITED"

    # reads are not limited
    listing = await client.get("/api/v1/one-time/credentials", headers=admin_headers)
    assert listing.status_code == 200
