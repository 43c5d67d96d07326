"""Data transfer objects for application use cases (no dependency on ORM or HTTP)."""

from onetime_access.application.dtos.credential import (
    CredentialResult,
    SessionResult,
    ValidationOutcome,
)

__all__ = [
    "CredentialResult",
    "SessionResult",
    "ValidationOutcome",
]
