"""Postgres-backed one-time credential store (implements ICredentialStore).

Each method runs in its own short transaction from the session factory:
the service performs no multi-step transactions, and the consuming write
is a single conditional UPDATE.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from onetime_access.application.interfaces.repositories import ConsumeOutcome
from onetime_access.domain.entities import CredentialEntity
from onetime_access.domain.exceptions import StoreUnavailableException
from onetime_access.infrastructure.persistence.database import get_session_factory
from onetime_access.infrastructure.persistence.models import OneTimeAccess
from onetime_access.shared.utils.datetime import ensure_utc
from onetime_access.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)


def _to_entity(row: OneTimeAccess) -> CredentialEntity:
    return CredentialEntity(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        duration_hours=row.duration_hours,
        created_at=ensure_utc(row.created_at),
        used_at=ensure_utc(row.used_at),
        session_token=row.session_token,
        session_expires_at=ensure_utc(row.session_expires_at),
    )


class CredentialRepository:
    """Credential store using SQLAlchemy. Same contract as FirestoreCredentialStore."""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """Yield a session inside a transaction.

        Driver errors and refused connections (asyncpg raises OSError unwrapped)
        become StoreUnavailableException.
        """
        factory = self._session_factory or get_session_factory()
        try:
            async with factory() as session:
                async with session.begin():
                    yield session
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Database %s failed", operation)
            raise StoreUnavailableException(operation, type(e).__name__) from e

    async def _first(self, operation: str, stmt) -> CredentialEntity | None:
        async with self._transaction(operation) as session:
            result = await session.execute(stmt.limit(1))
            row = result.scalars().first()
            return _to_entity(row) if row else None

    async def get_by_id(self, credential_id: str) -> CredentialEntity | None:
        """Return credential by ID."""
        return await self._first(
            "get_by_id", select(OneTimeAccess).where(OneTimeAccess.id == credential_id)
        )

    async def get_by_username(self, username: str) -> CredentialEntity | None:
        """Return the oldest credential with this exact username."""
        return await self._first(
            "get_by_username",
            select(OneTimeAccess)
            .where(OneTimeAccess.username == username)
            .order_by(OneTimeAccess.created_at.asc()),
        )

    async def get_by_session_token(self, token: str) -> CredentialEntity | None:
        """Return the credential holding this exact session token."""
        return await self._first(
            "get_by_session_token",
            select(OneTimeAccess).where(OneTimeAccess.session_token == token),
        )

    async def list_all(self) -> list[CredentialEntity]:
        """Return all credentials, newest created_at first."""
        async with self._transaction("list_all") as session:
            result = await session.execute(
                select(OneTimeAccess).order_by(OneTimeAccess.created_at.desc())
            )
            return [_to_entity(row) for row in result.scalars().all()]

    async def create(
        self,
        username: str,
        password_hash: str,
        duration_hours: int,
        created_at: datetime,
    ) -> CredentialEntity:
        """Insert an unconsumed credential."""
        row = OneTimeAccess(
            id=generate_cuid(),
            username=username,
            password_hash=password_hash,
            duration_hours=duration_hours,
            created_at=created_at,
        )
        async with self._transaction("create") as session:
            session.add(row)
            await session.flush()
            return _to_entity(row)

    async def update_fields(
        self,
        credential_id: str,
        username: str,
        password_hash: str,
        duration_hours: int,
    ) -> bool:
        """Overwrite the operator-editable columns; False if no row has this id."""
        stmt = (
            update(OneTimeAccess)
            .where(OneTimeAccess.id == credential_id)
            .values(
                username=username,
                password_hash=password_hash,
                duration_hours=duration_hours,
            )
        )
        async with self._transaction("update_fields") as session:
            result = await session.execute(stmt)
            return result.rowcount == 1

    async def consume(
        self,
        credential_id: str,
        used_at: datetime,
        session_token: str,
        session_expires_at: datetime,
    ) -> ConsumeOutcome:
        """Set the session triple only where used_at IS NULL.

        rowcount 1 means this call won; 0 means the row is gone or another
        request consumed it first (told apart with a follow-up read).
        """
        stmt = (
            update(OneTimeAccess)
            .where(
                OneTimeAccess.id == credential_id,
                OneTimeAccess.used_at.is_(None),
            )
            .values(
                used_at=used_at,
                session_token=session_token,
                session_expires_at=session_expires_at,
            )
        )
        async with self._transaction("consume") as session:
            result = await session.execute(stmt)
            if result.rowcount == 1:
                return ConsumeOutcome.CONSUMED
            exists = await session.execute(
                select(OneTimeAccess.id).where(OneTimeAccess.id == credential_id)
            )
            if exists.scalar_one_or_none() is None:
                return ConsumeOutcome.NOT_FOUND
            return ConsumeOutcome.ALREADY_CONSUMED

    async def delete(self, credential_id: str) -> None:
        """Delete the credential row (no-op if missing)."""
        async with self._transaction("delete") as session:
            await session.execute(
                delete(OneTimeAccess).where(OneTimeAccess.id == credential_id)
            )

    async def ping(self) -> None:
        """SELECT 1 against the database."""
        async with self._transaction("ping") as session:
            await session.execute(text("SELECT 1"))
