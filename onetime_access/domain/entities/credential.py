"""One-time credential domain entity.

Represents a single-use username/password pair and, once consumed, the
session it was exchanged for. Independent of persistence.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from onetime_access.domain.enums import CredentialState
from onetime_access.domain.exceptions import InvalidConfigurationException


@dataclass(frozen=True)
class CredentialEntity:
    """Domain entity for a one-time credential record.

    The session triple (used_at, session_token, session_expires_at) is either
    entirely None (unconsumed) or entirely set (consumed). Store adapters
    write it in one conditional update; see ICredentialStore.consume.
    """

    id: str
    username: str
    password_hash: str
    duration_hours: int | None
    created_at: datetime | None = None
    used_at: datetime | None = None
    session_token: str | None = None
    session_expires_at: datetime | None = None

    @property
    def is_consumed(self) -> bool:
        return self.used_at is not None

    def matches(self, username: str, password_hash: str) -> bool:
        """Return True if username and password hash both match (constant-time hash compare)."""
        hash_ok = hmac.compare_digest(
            self.password_hash.encode("ascii", errors="replace"),
            password_hash.encode("ascii", errors="replace"),
        )
        return hash_ok and self.username == username

    def session_window(self) -> timedelta:
        """Return the validity window length.

        Raises:
            InvalidConfigurationException: If duration_hours is missing or not positive.
        """
        if not self.duration_hours or self.duration_hours <= 0:
            raise InvalidConfigurationException(self.id)
        return timedelta(hours=self.duration_hours)

    def is_session_active(self, now: datetime) -> bool:
        """Return True if a session was issued and has not expired at now.

        Expired means strictly in the past: at exactly session_expires_at the
        session is still active.
        """
        if self.session_expires_at is None:
            return False
        return not self.session_expires_at < now

    def state(self, now: datetime) -> CredentialState:
        """Return the derived lifecycle state at now."""
        if not self.is_consumed:
            return CredentialState.UNCONSUMED
        if self.is_session_active(now):
            return CredentialState.ACTIVE
        return CredentialState.EXPIRED

    def consumed(
        self, used_at: datetime, session_token: str, session_expires_at: datetime
    ) -> CredentialEntity:
        """Return a copy with the session triple set."""
        return replace(
            self,
            used_at=used_at,
            session_token=session_token,
            session_expires_at=session_expires_at,
        )
