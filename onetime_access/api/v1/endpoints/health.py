"""Health check endpoints: liveness and readiness (credential store ping)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from onetime_access.api.v1.dependencies import get_credential_store
from onetime_access.application.interfaces import ICredentialStore
from onetime_access.core.config import get_settings
from onetime_access.domain.exceptions import StoreUnavailableException
from onetime_access.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Credential store unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(
    store: Annotated[ICredentialStore, Depends(get_credential_store)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 if the credential store answers a ping; 503 otherwise."""
    backend = get_settings().database_backend
    try:
        await store.ping()
    except StoreUnavailableException as e:
        logger.warning("Readiness check failed: %s", e.details)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                backend=backend,
                message="Credential store unreachable",
            ).model_dump(),
        )
    return ReadinessResponse(backend=backend)
