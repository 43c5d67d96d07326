"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the credential store, the one-time access
service and the admin gate. Routes depend only on these dependencies, not
on infrastructure directly.

When database_backend is 'postgres', the store uses SQLAlchemy.
When database_backend is 'firestore', the store uses the Firestore REST
client created in the lifespan (app.state.firestore_client).
Switch backends via DATABASE_BACKEND in config.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from onetime_access.application.interfaces import ICredentialStore
from onetime_access.application.services import HashService, OneTimeAccessService
from onetime_access.core.config import get_settings
from onetime_access.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
)
from onetime_access.infrastructure.firebase.repositories import FirestoreCredentialStore
from onetime_access.infrastructure.persistence.repositories import CredentialRepository
from onetime_access.infrastructure.security.jwt import is_admin_claims, verify_token

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)
_hash_service = HashService()


def get_credential_store(request: Request) -> ICredentialStore:
    """Return the configured credential store.

    Never raises: an unavailable backend surfaces as StoreUnavailableException
    from the first store call, so validation can still fail closed.
    """
    settings = get_settings()
    if settings.database_backend == "postgres":
        return CredentialRepository()
    return FirestoreCredentialStore(getattr(request.app.state, "firestore_client", None))


def get_one_time_access_service(
    store: Annotated[ICredentialStore, Depends(get_credential_store)],
) -> OneTimeAccessService:
    """Build the one-time access service over the request's store."""
    return OneTimeAccessService(store, hash_service=_hash_service)


async def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> dict[str, Any]:
    """Return the admin's JWT claims; 401 if missing or invalid, 403 if not an admin."""
    if not credentials:
        raise AuthenticationException()
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.info("Admin token rejected: %s", e)
        raise AuthenticationException("Invalid or expired token") from e
    if not is_admin_claims(payload):
        logger.info("Admin access denied for subject %s", payload.get("sub"))
        raise AuthorizationException()
    return payload


OneTimeAccessServiceDep = Annotated[OneTimeAccessService, Depends(get_one_time_access_service)]
AdminClaims = Annotated[dict[str, Any], Depends(require_admin)]
