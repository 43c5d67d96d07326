"""Thin async Firestore REST v1 client (no firebase-admin, no grpc).

Only what the credential store needs: read, create, field-masked update,
delete, and single-filter queries. google-auth supplies service account
tokens; httpx.AsyncClient does the I/O.

Conditional writes use Firestore preconditions. A PATCH carrying
currentDocument.updateTime only applies if the document has not been
written since the snapshot with that updateTime was read.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx

from onetime_access.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_document,
    encode_document,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"

_OPERATORS = {"==": "EQUAL", "!=": "NOT_EQUAL"}


def service_account_credentials(key_dict: dict):
    """Return service account credentials scoped to Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _refresh_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DocumentExistsError(Exception):
    """createDocument hit an existing document ID (ALREADY_EXISTS)."""


class PreconditionFailedError(Exception):
    """The document changed after the snapshot the write was based on."""


def _rpc_status(resp: httpx.Response) -> str | None:
    """google.rpc status name from an error body, e.g. 'FAILED_PRECONDITION'."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, list):
        body = body[0] if body else {}
    error = body.get("error") if isinstance(body, dict) else None
    return error.get("status") if isinstance(error, dict) else None


class DocumentSnapshot:
    """Decoded document fields plus the server updateTime they were read at."""

    def __init__(self, id_: str, data: dict, update_time: str | None = None):
        self.id = id_
        self._data = data
        self.update_time = update_time

    @classmethod
    def from_rest(cls, doc: dict) -> DocumentSnapshot:
        name = doc.get("name", "")
        return cls(
            name.rsplit("/", 1)[-1],
            decode_document(doc.get("fields")),
            doc.get("updateTime"),
        )

    def to_dict(self) -> dict:
        return self._data


class DocumentReference:
    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.rsplit("/", 1)[-1]

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document, or None if it does not exist."""
        doc = await self._client.send("GET", self._path)
        return DocumentSnapshot.from_rest(doc) if doc else None

    async def update(
        self, data: dict[str, Any], *, update_time: str | None = None
    ) -> bool:
        """Write only the fields in ``data``.

        Without ``update_time`` the document must exist. With it, the document
        must be unchanged since the snapshot carrying that updateTime.

        Returns:
            True if written, False if the document does not exist.

        Raises:
            PreconditionFailedError: update_time given and the document changed.
        """
        params = [("updateMask.fieldPaths", field) for field in data]
        if update_time is None:
            params.append(("currentDocument.exists", "true"))
        else:
            params.append(("currentDocument.updateTime", update_time))
        written = await self._client.send(
            "PATCH", self._path, body=encode_document(data), params=params
        )
        return written is not None

    async def delete(self) -> None:
        """Delete the document; a missing document is not an error."""
        await self._client.send("DELETE", self._path)


class Query:
    """runQuery over one collection: at most one field filter, one ordering."""

    def __init__(self, collection: CollectionReference):
        self._collection = collection
        self._where: dict[str, Any] | None = None
        self._order: dict[str, Any] | None = None
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> Query:
        self._where = {
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": _OPERATORS.get(op, op),
                "value": _encode_value(value),
            }
        }
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        self._order = {"field": {"fieldPath": field}, "direction": direction}
        return self

    def limit(self, n: int) -> Query:
        self._limit = n
        return self

    def to_structured_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {
            "from": [{"collectionId": self._collection.collection_id}]
        }
        if self._where is not None:
            query["where"] = self._where
        if self._order is not None:
            query["orderBy"] = [self._order]
        if self._limit is not None:
            query["limit"] = self._limit
        return query

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        # The response is a list of results; entries without "document" only carry readTime.
        results = await self._collection.client.send(
            "POST",
            f"{self._collection.parent}:runQuery",
            body={"structuredQuery": self.to_structured_query()},
        )
        for item in results or []:
            if "document" in item:
                yield DocumentSnapshot.from_rest(item["document"])


class CollectionReference:
    def __init__(self, client: FirestoreRESTClient, path: str):
        self.client = client
        self.path = path.rstrip("/")
        self.parent, self.collection_id = self.path.rsplit("/", 1)

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self.client, f"{self.path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID.

        Raises:
            DocumentExistsError: the ID is already taken.
        """
        await self.client.send(
            "POST",
            self.path,
            body=encode_document(data),
            params=[("documentId", document_id)],
        )

    def where(self, field: str, op: str, value: Any) -> Query:
        return Query(self).where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        return Query(self).order_by(field, direction)


class FirestoreRESTClient:
    """Firestore REST client bound to one project's (default) database."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.project_id = project_id
        self._credentials = credentials
        self._root = f"projects/{project_id}/databases/(default)/documents"
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._root}/{collection_id}")

    async def get_token(self) -> str:
        """Return a valid access token; refresh runs in a worker thread."""
        return await asyncio.to_thread(_refresh_token, self._credentials)

    async def send(
        self,
        method: str,
        path: str,
        *,
        body: dict | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        """Call the REST API and return the decoded JSON body.

        Returns None on 404 and {} for an empty body. ALREADY_EXISTS and
        FAILED_PRECONDITION map to DocumentExistsError and
        PreconditionFailedError; any other non-2xx raises httpx.HTTPStatusError.
        """
        resp = await self._http.request(
            method,
            f"{_BASE}/{path}",
            headers={"Authorization": f"Bearer {await self.get_token()}"},
            json=body,
            params=params,
        )
        if resp.status_code == 404:
            return None
        if resp.status_code in (400, 409):
            status = _rpc_status(resp)
            if status == "ALREADY_EXISTS":
                raise DocumentExistsError(path)
            if status == "FAILED_PRECONDITION":
                raise PreconditionFailedError(path)
        resp.raise_for_status()
        return resp.json() if resp.content else {}

    async def aclose(self) -> None:
        """Close the HTTP client unless it was injected."""
        if self._owns_http:
            await self._http.aclose()
