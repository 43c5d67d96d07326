"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from onetime_access.api.v1.dependencies.
"""

from fastapi import APIRouter

from onetime_access.api.v1.endpoints import credentials, health, one_time

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(one_time.router, prefix="/one-time", tags=["one-time"])
api_router.include_router(
    credentials.router, prefix="/one-time/credentials", tags=["one-time-admin"]
)
