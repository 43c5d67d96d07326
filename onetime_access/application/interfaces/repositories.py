"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities only; no infrastructure imports.

Every method is a network round trip. Implementations raise
StoreUnavailableException when the backing store fails and never cache
records between calls.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from onetime_access.domain.entities import CredentialEntity


class ConsumeOutcome(str, Enum):
    """Result of a conditional consume write."""

    CONSUMED = "consumed"
    ALREADY_CONSUMED = "already_consumed"
    NOT_FOUND = "not_found"


class ICredentialStore(Protocol):
    """Protocol for the one-time credential store (DIP)."""

    async def get_by_id(self, credential_id: str) -> CredentialEntity | None:
        """Return credential by ID."""

    async def get_by_username(self, username: str) -> CredentialEntity | None:
        """Return the first credential with this exact username."""

    async def get_by_session_token(self, token: str) -> CredentialEntity | None:
        """Return the credential holding this exact session token."""

    async def list_all(self) -> list[CredentialEntity]:
        """Return all credentials, newest created_at first."""

    async def create(
        self,
        username: str,
        password_hash: str,
        duration_hours: int,
        created_at: datetime,
    ) -> CredentialEntity:
        """Create an unconsumed credential; return it with its generated id."""

    async def update_fields(
        self,
        credential_id: str,
        username: str,
        password_hash: str,
        duration_hours: int,
    ) -> bool:
        """Overwrite username, password hash and duration. Return False if the id is unknown.

        Session fields are left untouched.
        """

    async def consume(
        self,
        credential_id: str,
        used_at: datetime,
        session_token: str,
        session_expires_at: datetime,
    ) -> ConsumeOutcome:
        """Write used_at, session_token and session_expires_at in one write,
        only if used_at is still null at write time (compare-and-swap).

        Of two concurrent calls for the same unconsumed credential exactly one
        returns CONSUMED; the other returns ALREADY_CONSUMED.
        """

    async def delete(self, credential_id: str) -> None:
        """Delete the credential. Idempotent when already missing."""

    async def ping(self) -> None:
        """Round-trip to the store; raise StoreUnavailableException if unreachable."""
