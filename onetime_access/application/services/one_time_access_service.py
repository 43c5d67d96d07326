"""One-time access: single-use, time-boxed credentials exchanged for a session.

Lifecycle of a credential:

    Unconsumed --login--> Consumed (active until session_expires_at) --time--> Consumed (expired)

Revocation deletes the record from any state. There is no way back to
Unconsumed. Expiry is computed at read time; nothing is written when a
session expires.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from onetime_access.application.dtos.credential import (
    CredentialResult,
    SessionResult,
    ValidationOutcome,
)
from onetime_access.application.interfaces.repositories import (
    ConsumeOutcome,
    ICredentialStore,
)
from onetime_access.application.services.hash_service import HashService
from onetime_access.domain.entities import CredentialEntity
from onetime_access.domain.enums import InactiveReason
from onetime_access.domain.exceptions import (
    CredentialAlreadyConsumedException,
    CredentialNotFoundException,
    InvalidCredentialsException,
    MissingFieldsException,
)
from onetime_access.shared.telemetry.tracing import add_span_event, traced
from onetime_access.shared.utils.datetime import utc_now
from onetime_access.shared.utils.generators import generate_session_token

logger = logging.getLogger(__name__)


def _require_fields(
    username: str | None,
    password: str | None,
    duration_hours: int | None,
) -> None:
    missing: list[str] = []
    if not username:
        missing.append("username")
    if not password:
        missing.append("password")
    # bool is an int subclass; True is not a duration.
    if (
        not isinstance(duration_hours, int)
        or isinstance(duration_hours, bool)
        or duration_hours <= 0
    ):
        missing.append("durationHours")
    if missing:
        raise MissingFieldsException(missing)


class OneTimeAccessService:
    """Issues, consumes, validates and revokes one-time credentials.

    The store is injected; the service holds no state of its own between
    calls and re-reads the store on every operation.
    """

    def __init__(
        self,
        store: ICredentialStore,
        hash_service: HashService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._hash = hash_service or HashService()
        self._clock = clock

    def _to_result(self, entity: CredentialEntity) -> CredentialResult:
        return CredentialResult(
            id=entity.id,
            username=entity.username,
            duration_hours=entity.duration_hours,
            created_at=entity.created_at,
            used_at=entity.used_at,
            session_expires_at=entity.session_expires_at,
            state=entity.state(self._clock()),
        )

    @traced("one_time.login")
    async def login(self, username: str | None, password: str | None) -> SessionResult:
        """Exchange an unused username/password for a session token.

        Raises:
            MissingFieldsException: username or password empty.
            CredentialNotFoundException: no credential with this username.
            CredentialAlreadyConsumedException: credential already used (including a lost race).
            InvalidCredentialsException: password does not match.
            InvalidConfigurationException: stored duration missing or zero.
            StoreUnavailableException: the store failed.
        """
        if not username or not password:
            missing = [n for n, v in (("username", username), ("password", password)) if not v]
            raise MissingFieldsException(missing, message="Missing credentials")

        credential = await self._store.get_by_username(username)
        if credential is None:
            logger.info("One-time login rejected: unknown username")
            raise CredentialNotFoundException()

        if credential.is_consumed:
            logger.info("One-time login rejected: credential %s already used", credential.id)
            raise CredentialAlreadyConsumedException()

        if not credential.matches(username, self._hash.hash_password(password)):
            logger.info("One-time login rejected: bad password for credential %s", credential.id)
            raise InvalidCredentialsException()

        window = credential.session_window()

        now = self._clock()
        token = generate_session_token()
        expires_at = now + window

        outcome = await self._store.consume(
            credential.id,
            used_at=now,
            session_token=token,
            session_expires_at=expires_at,
        )
        if outcome is ConsumeOutcome.ALREADY_CONSUMED:
            logger.info("One-time login lost consume race for credential %s", credential.id)
            raise CredentialAlreadyConsumedException()
        if outcome is ConsumeOutcome.NOT_FOUND:
            logger.info("One-time credential %s revoked during login", credential.id)
            raise CredentialNotFoundException(credential.id)

        logger.info(
            "One-time credential %s consumed; session valid until %s",
            credential.id,
            expires_at.isoformat(),
        )
        return SessionResult(token=token, expires_at=expires_at)

    @traced("one_time.validate")
    async def validate(self, token: str | None) -> ValidationOutcome:
        """Return whether token belongs to a session that has not expired.

        Side-effect free and never raises: store failures come back as
        inactive with reason STORE_ERROR (fail closed).
        """
        if not token:
            return ValidationOutcome.inactive(InactiveReason.MISSING_TOKEN)
        try:
            credential = await self._store.get_by_session_token(token)
        except Exception:
            logger.warning("Session validation failed closed: store error", exc_info=True)
            add_span_event("one_time.validate.store_error")
            return ValidationOutcome.inactive(InactiveReason.STORE_ERROR)

        if credential is None:
            return ValidationOutcome.inactive(InactiveReason.NOT_FOUND)
        if not credential.is_session_active(self._clock()):
            return ValidationOutcome.inactive(InactiveReason.EXPIRED)
        return ValidationOutcome(active=True, expires_at=credential.session_expires_at)

    @traced("one_time.issue")
    async def issue(
        self,
        username: str | None,
        password: str | None,
        duration_hours: int | None,
    ) -> CredentialResult:
        """Create a new unconsumed credential (administrative)."""
        _require_fields(username, password, duration_hours)
        entity = await self._store.create(
            username=username,
            password_hash=self._hash.hash_password(password),
            duration_hours=duration_hours,
            created_at=self._clock(),
        )
        logger.info("Issued one-time credential %s (%sh)", entity.id, duration_hours)
        return self._to_result(entity)

    @traced("one_time.update")
    async def update(
        self,
        credential_id: str,
        username: str | None,
        password: str | None,
        duration_hours: int | None,
    ) -> None:
        """Overwrite username, password and duration (administrative, last write wins)."""
        _require_fields(username, password, duration_hours)
        updated = await self._store.update_fields(
            credential_id,
            username=username,
            password_hash=self._hash.hash_password(password),
            duration_hours=duration_hours,
        )
        if not updated:
            raise CredentialNotFoundException(credential_id)
        logger.info("Updated one-time credential %s", credential_id)

    @traced("one_time.revoke")
    async def revoke(self, credential_id: str) -> None:
        """Delete the credential; any session it issued stops validating immediately."""
        await self._store.delete(credential_id)
        logger.info("Revoked one-time credential %s", credential_id)

    @traced("one_time.list")
    async def list_credentials(self) -> list[CredentialResult]:
        """Return all credentials, newest first (administrative)."""
        return [self._to_result(c) for c in await self._store.list_all()]

    @traced("one_time.get")
    async def get_credential(self, credential_id: str) -> CredentialResult:
        """Return one credential (administrative)."""
        entity = await self._store.get_by_id(credential_id)
        if entity is None:
            raise CredentialNotFoundException(credential_id)
        return self._to_result(entity)
