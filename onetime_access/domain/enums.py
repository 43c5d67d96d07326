"""Domain enumerations for the one-time access service."""

from enum import Enum


class CredentialState(str, Enum):
    """Derived lifecycle state of a credential record.

    Revoked credentials are deleted, so they have no state of their own.
    """

    UNCONSUMED = "unconsumed"
    ACTIVE = "active"
    EXPIRED = "expired"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid state values as strings."""
        return [state.value for state in cls]


class InactiveReason(str, Enum):
    """Why a session validation came back inactive.

    STORE_ERROR is the fail-closed case: the store could not be read, so the
    session is treated as not logged in.
    """

    MISSING_TOKEN = "missing_token"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    STORE_ERROR = "store_error"
