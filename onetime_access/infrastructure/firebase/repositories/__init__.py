"""Firestore-backed repository implementations (swappable with Postgres)."""

from onetime_access.infrastructure.firebase.repositories.credential_repo_firestore import (
    FirestoreCredentialStore,
)

__all__ = ["FirestoreCredentialStore"]
