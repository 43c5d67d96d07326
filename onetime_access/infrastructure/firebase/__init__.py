"""Firestore integration over the REST API."""

from onetime_access.infrastructure.firebase._rest_client import FirestoreRESTClient
from onetime_access.infrastructure.firebase.client import create_firestore_client

__all__ = [
    "FirestoreRESTClient",
    "create_firestore_client",
]
