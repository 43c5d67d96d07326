"""Pytest configuration and fixtures for onetime_access.

Environment defaults are set before onetime_access.main is imported so that
Settings validation passes without a real Firestore project. HTTP tests run
against the app with the credential store dependency replaced by an
in-memory store; Postgres tests are marked requires_db and skip without a
database.
"""

import json
import os

os.environ.setdefault("DATABASE_BACKEND", "firestore")
os.environ.setdefault(
    "FIREBASE_SERVICE_ACCOUNT_KEY", json.dumps({"project_id": "test-project"})
)
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest
from httpx import ASGITransport, AsyncClient

from onetime_access.api.v1.dependencies import (
    get_credential_store,
    get_one_time_access_service,
)
from onetime_access.application.services import OneTimeAccessService
from onetime_access.core.limiter import limiter
from onetime_access.infrastructure.security.jwt import create_access_token
from onetime_access.main import app
from tests.fakes import FakeClock, InMemoryCredentialStore


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def service(store: InMemoryCredentialStore, clock: FakeClock) -> OneTimeAccessService:
    return OneTimeAccessService(store, clock=clock)


@pytest.fixture(autouse=True)
def _disable_rate_limits():
    """Rate limits are keyed by client address; every test client shares one."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
async def client(store: InMemoryCredentialStore, service: OneTimeAccessService) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) over the in-memory store."""
    app.dependency_overrides[get_credential_store] = lambda: store
    app.dependency_overrides[get_one_time_access_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    token = create_access_token({"sub": "operator-1", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}
