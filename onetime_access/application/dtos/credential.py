"""DTOs for one-time credential use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from onetime_access.domain.enums import CredentialState, InactiveReason


@dataclass(frozen=True)
class CredentialResult:
    """Credential read-model for administrators. No password hash, no session token."""

    id: str
    username: str
    duration_hours: int | None
    created_at: datetime | None
    used_at: datetime | None
    session_expires_at: datetime | None
    state: CredentialState


@dataclass(frozen=True)
class SessionResult:
    """Result of a successful login: the bearer token and when it stops being valid."""

    token: str
    expires_at: datetime


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a session token.

    active is the only thing callers outside the service see. reason tells
    a confirmed-inactive session apart from a store failure that was
    treated as inactive.
    """

    active: bool
    expires_at: datetime | None = None
    reason: InactiveReason | None = None

    @classmethod
    def inactive(cls, reason: InactiveReason) -> "ValidationOutcome":
        return cls(active=False, reason=reason)
