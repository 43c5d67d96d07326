"""Public one-time endpoints: login and validate over the in-memory store."""

from datetime import timedelta

from httpx import AsyncClient

from tests.fakes import T0, make_credential


async def test_login_returns_token_and_expiry(client: AsyncClient, store) -> None:
    store.add(make_credential(duration_hours=24))
    response = await client.post(
        "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
    )
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"token", "expiresAt"}
    assert len(data["token"]) == 32
    assert data["expiresAt"] == "2025-01-16T12:00:00.000Z"
    assert response.headers["cache-control"] == "no-store"


async def test_second_login_is_gone(client: AsyncClient, store) -> None:
    store.add(make_credential())
    body = {"username": "guest", "password": "s3cret"}
    assert (await client.post("/api/v1/one-time/login", json=body)).status_code == 200
    response = await client.post("/api/v1/one-time/login", json=body)
    assert response.status_code == 410
    assert response.json()["error"] == "CREDENTIAL_ALREADY_CONSUMED"
    assert response.json()["message"] == "Credentials already used"


async def test_login_errors(client: AsyncClient, store) -> None:
    store.add(make_credential())
    store.add(make_credential(id="cred-b", username="broken", duration_hours=0))

    missing = await client.post("/api/v1/one-time/login", json={"username": "guest"})
    assert missing.status_code == 400
    assert missing.json()["message"] == "Missing credentials"

    unknown = await client.post(
        "/api/v1/one-time/login", json={"username": "nobody", "password": "x"}
    )
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "No active credentials"

    wrong = await client.post(
        "/api/v1/one-time/login", json={"username": "guest", "password": "x"}
    )
    assert wrong.status_code == 401
    assert wrong.json()["error"] == "INVALID_CREDENTIALS"

    invalid = await client.post(
        "/api/v1/one-time/login", json={"username": "broken", "password": "s3cret"}
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Invalid duration"


async def test_login_store_failure_is_500(client: AsyncClient, store) -> None:
    store.fail = True
    response = await client.post(
        "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
    )
    assert response.status_code == 500
    assert response.json()["message"] == "Internal error"


async def test_validate_round_trip(client: AsyncClient, store, clock) -> None:
    store.add(make_credential(duration_hours=1))
    login = await client.post(
        "/api/v1/one-time/login", json={"username": "guest", "password": "s3cret"}
    )
    token = login.json()["token"]

    active = await client.post("/api/v1/one-time/validate", json={"token": token})
    assert active.status_code == 200
    assert active.json() == {"active": True, "expiresAt": "2025-01-15T13:00:00.000Z"}

    clock.now = T0 + timedelta(hours=1, seconds=1)
    expired = await client.post("/api/v1/one-time/validate", json={"token": token})
    assert expired.status_code == 200
    assert expired.json() == {"active": False}


async def test_validate_never_errors(client: AsyncClient, store) -> None:
    for kwargs in (
        {"json": {"token": "0" * 32}},
        {"json": {}},
        {"json": {"token": 42}},
        {"json": ["not", "an", "object"]},
        {"content": b"not json", "headers": {"content-type": "application/json"}},
        {},
    ):
        response = await client.post("/api/v1/one-time/validate", **kwargs)
        assert response.status_code == 200, kwargs
        assert response.json() == {"active": False}, kwargs


async def test_validate_store_failure_reads_inactive(client: AsyncClient, store) -> None:
    store.fail = True
    response = await client.post("/api/v1/one-time/validate", json={"token": "a" * 32})
    assert response.status_code == 200
    assert response.json() == {"active": False}
