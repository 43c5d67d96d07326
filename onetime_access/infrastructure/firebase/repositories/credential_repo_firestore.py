"""Firestore-backed one-time credential store (implements ICredentialStore)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import httpx
from google.auth.exceptions import GoogleAuthError

from onetime_access.application.interfaces.repositories import ConsumeOutcome
from onetime_access.domain.entities import CredentialEntity
from onetime_access.domain.exceptions import StoreUnavailableException
from onetime_access.infrastructure.firebase._rest_client import (
    CollectionReference,
    DocumentExistsError,
    DocumentSnapshot,
    FirestoreRESTClient,
    PreconditionFailedError,
)
from onetime_access.infrastructure.firebase.collections import (
    COLLECTION_ONE_TIME_ACCESS,
    FIELD_CREATED_AT,
    FIELD_DURATION_HOURS,
    FIELD_PASSWORD_HASH,
    FIELD_SESSION_EXPIRES_AT,
    FIELD_SESSION_TOKEN,
    FIELD_USED_AT,
    FIELD_USERNAME,
)
from onetime_access.shared.utils.datetime import ensure_utc
from onetime_access.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

# Re-reads after a precondition failure caused by a concurrent non-consuming
# write (e.g. an admin edit). A concurrent consume ends the loop on re-read.
_CONSUME_ATTEMPTS = 3
_LIST_LIMIT = 1000
# A cuid collision is retried once with a fresh id.
_CREATE_ATTEMPTS = 2


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate transport and auth failures into StoreUnavailableException."""
    try:
        yield
    except (httpx.HTTPError, GoogleAuthError) as e:
        logger.exception("Firestore %s failed", operation)
        raise StoreUnavailableException(operation, type(e).__name__) from e


def _to_int(value) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_entity(snapshot: DocumentSnapshot) -> CredentialEntity:
    data = snapshot.to_dict()
    return CredentialEntity(
        id=snapshot.id,
        username=data.get(FIELD_USERNAME) or "",
        password_hash=data.get(FIELD_PASSWORD_HASH) or "",
        duration_hours=_to_int(data.get(FIELD_DURATION_HOURS)),
        created_at=ensure_utc(data.get(FIELD_CREATED_AT)),
        used_at=ensure_utc(data.get(FIELD_USED_AT)),
        session_token=data.get(FIELD_SESSION_TOKEN),
        session_expires_at=ensure_utc(data.get(FIELD_SESSION_EXPIRES_AT)),
    )


class FirestoreCredentialStore:
    """Credential store using Firestore. Same contract as CredentialRepository (Postgres)."""

    def __init__(self, client: FirestoreRESTClient | None) -> None:
        self._client = client

    @property
    def _coll(self) -> CollectionReference:
        """The credential collection; StoreUnavailableException if the client failed to start."""
        if self._client is None:
            raise StoreUnavailableException("connect", "Firestore client not initialized")
        return self._client.collection(COLLECTION_ONE_TIME_ACCESS)

    async def _first_where(self, field: str, value: str) -> CredentialEntity | None:
        async for snapshot in self._coll.where(field, "==", value).limit(1).stream():
            return _to_entity(snapshot)
        return None

    async def get_by_id(self, credential_id: str) -> CredentialEntity | None:
        """Return credential by document ID."""
        with _store_errors("get_by_id"):
            doc = await self._coll.document(credential_id).get()
        return _to_entity(doc) if doc else None

    async def get_by_username(self, username: str) -> CredentialEntity | None:
        """Return the first credential with this exact username."""
        with _store_errors("get_by_username"):
            return await self._first_where(FIELD_USERNAME, username)

    async def get_by_session_token(self, token: str) -> CredentialEntity | None:
        """Return the credential holding this exact session token."""
        with _store_errors("get_by_session_token"):
            return await self._first_where(FIELD_SESSION_TOKEN, token)

    async def list_all(self) -> list[CredentialEntity]:
        """Return credentials, newest createdAt first."""
        query = self._coll.order_by(FIELD_CREATED_AT, "DESCENDING").limit(_LIST_LIMIT)
        with _store_errors("list_all"):
            return [_to_entity(s) async for s in query.stream()]

    async def create(
        self,
        username: str,
        password_hash: str,
        duration_hours: int,
        created_at: datetime,
    ) -> CredentialEntity:
        """Create an unconsumed credential document with a generated ID."""
        for _ in range(_CREATE_ATTEMPTS):
            credential_id = generate_cuid()
            try:
                with _store_errors("create"):
                    await self._coll.create(
                        credential_id,
                        {
                            FIELD_USERNAME: username,
                            FIELD_PASSWORD_HASH: password_hash,
                            FIELD_DURATION_HOURS: duration_hours,
                            FIELD_CREATED_AT: created_at,
                            FIELD_USED_AT: None,
                            FIELD_SESSION_TOKEN: None,
                            FIELD_SESSION_EXPIRES_AT: None,
                        },
                    )
            except DocumentExistsError:
                logger.warning("Credential id %s already exists; regenerating", credential_id)
                continue
            return CredentialEntity(
                id=credential_id,
                username=username,
                password_hash=password_hash,
                duration_hours=duration_hours,
                created_at=created_at,
            )
        raise StoreUnavailableException("create", "DocumentExistsError")

    async def update_fields(
        self,
        credential_id: str,
        username: str,
        password_hash: str,
        duration_hours: int,
    ) -> bool:
        """Overwrite the operator-editable fields; False if the document is missing."""
        with _store_errors("update_fields"):
            return await self._coll.document(credential_id).update(
                {
                    FIELD_USERNAME: username,
                    FIELD_PASSWORD_HASH: password_hash,
                    FIELD_DURATION_HOURS: duration_hours,
                }
            )

    async def consume(
        self,
        credential_id: str,
        used_at: datetime,
        session_token: str,
        session_expires_at: datetime,
    ) -> ConsumeOutcome:
        """Write the session triple only if usedAt is still null (updateTime precondition)."""
        doc = self._coll.document(credential_id)
        with _store_errors("consume"):
            for _ in range(_CONSUME_ATTEMPTS):
                snapshot = await doc.get()
                if snapshot is None:
                    return ConsumeOutcome.NOT_FOUND
                if snapshot.to_dict().get(FIELD_USED_AT) is not None:
                    return ConsumeOutcome.ALREADY_CONSUMED
                try:
                    written = await doc.update(
                        {
                            FIELD_USED_AT: used_at,
                            FIELD_SESSION_TOKEN: session_token,
                            FIELD_SESSION_EXPIRES_AT: session_expires_at,
                        },
                        update_time=snapshot.update_time,
                    )
                except PreconditionFailedError:
                    logger.debug("Credential %s changed during consume; re-reading", credential_id)
                    continue
                return ConsumeOutcome.CONSUMED if written else ConsumeOutcome.NOT_FOUND
        logger.warning(
            "Credential %s kept changing during consume; treating as already used",
            credential_id,
        )
        return ConsumeOutcome.ALREADY_CONSUMED

    async def delete(self, credential_id: str) -> None:
        """Delete the credential document (idempotent)."""
        with _store_errors("delete"):
            await self._coll.document(credential_id).delete()

    async def ping(self) -> None:
        """Run a one-document query to prove the store is reachable."""
        with _store_errors("ping"):
            async for _ in self._coll.order_by(FIELD_CREATED_AT).limit(1).stream():
                break
