"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the {error, message, details} JSON body.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from onetime_access.core.config import get_settings
from onetime_access.domain.exceptions import OneTimeAccessException, StoreUnavailableException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "MISSING_FIELDS": 400,
    "INVALID_CONFIGURATION": 400,
    "INVALID_CREDENTIALS": 401,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "CREDENTIAL_NOT_FOUND": 404,
    "CREDENTIAL_ALREADY_CONSUMED": 410,
    "STORE_UNAVAILABLE": 500,
}


def status_for(exc: OneTimeAccessException) -> int:
    """HTTP status for a domain exception (400 for unmapped codes)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _domain_exception_handler(
    request: Request, exc: OneTimeAccessException
) -> JSONResponse:
    """Return JSON from OneTimeAccessException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if isinstance(exc, StoreUnavailableException):
        logger.warning("%s %s: %s", request.method, request.url.path, exc.details)
    headers = {"WWW-Authenticate": "Bearer"} if exc.error_code == "AUTHENTICATION_ERROR" else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 RATE_LIMITED; a throttled session check reads as inactive instead."""
    if request.url.path == request.app.url_path_for("validate_session"):
        client = request.client.host if request.client else "-"
        logger.warning("Session validation throttled for %s", client)
        return JSONResponse(status_code=200, content={"active": False})
    response = JSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMITED",
            "message": f"Rate limit exceeded: {exc.detail}",
            "details": {"limit": exc.detail},
        },
    )
    return request.app.state.limiter._inject_headers(
        response, getattr(request.state, "view_rate_limit", None)
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500 carrying the request ID; exception text only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": detail,
            "details": {"request_id": getattr(request.state, "request_id", None)},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: OneTimeAccessException (and subclasses), RequestValidationError,
    RateLimitExceeded, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(OneTimeAccessException, _domain_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
