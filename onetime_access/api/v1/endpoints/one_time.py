"""Public one-time access endpoints: login (consume) and session validation."""

import logging

from fastapi import APIRouter, Request

from onetime_access.api.v1.dependencies import OneTimeAccessServiceDep
from onetime_access.core.limiter import limit_login, limit_validate
from onetime_access.schemas.one_time import (
    LoginRequest,
    SessionResponse,
    ValidateResponse,
)
from onetime_access.shared.utils.datetime import isoformat_utc

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=SessionResponse)
@limit_login
async def login(
    request: Request,
    body: LoginRequest,
    service: OneTimeAccessServiceDep,
) -> SessionResponse:
    """Exchange one-time username/password for a session token.

    Succeeds at most once per credential. Errors: 400 missing credentials,
    404 unknown username, 410 already used, 401 wrong password,
    400 invalid duration, 500 store failure.
    """
    result = await service.login(body.username, body.password)
    return SessionResponse.from_result(result)


async def _read_token(request: Request) -> str | None:
    """Return body["token"] when the body is a JSON object with a string token."""
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    token = body.get("token")
    return token if isinstance(token, str) else None


@router.post(
    "/validate",
    name="validate_session",
    response_model=ValidateResponse,
    response_model_exclude_none=True,
)
@limit_validate
async def validate(
    request: Request,
    service: OneTimeAccessServiceDep,
) -> ValidateResponse:
    """Report whether a session token is active. Always 200.

    Missing, unknown or expired tokens and store failures all read as
    {"active": false}; a malformed body counts as a missing token.
    """
    outcome = await service.validate(await _read_token(request))
    if not outcome.active:
        logger.debug("Session inactive: %s", outcome.reason.value if outcome.reason else None)
        return ValidateResponse(active=False)
    return ValidateResponse(active=True, expires_at=isoformat_utc(outcome.expires_at))
