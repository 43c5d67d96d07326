"""SQLAlchemy-backed repository implementations (swappable with Firestore)."""

from onetime_access.infrastructure.persistence.repositories.credential_repo import (
    CredentialRepository,
)

__all__ = ["CredentialRepository"]
