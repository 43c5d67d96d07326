"""Admin bearer token helpers."""

from onetime_access.infrastructure.security.jwt import (
    create_access_token,
    is_admin_claims,
    verify_token,
)

__all__ = ["create_access_token", "is_admin_claims", "verify_token"]
