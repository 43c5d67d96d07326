"""Ports (protocols) implemented by infrastructure."""

from onetime_access.application.interfaces.repositories import (
    ConsumeOutcome,
    ICredentialStore,
)

__all__ = ["ConsumeOutcome", "ICredentialStore"]
