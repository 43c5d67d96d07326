"""Tests for OneTimeAccessService over the in-memory store and a fake clock."""

import asyncio
from datetime import timedelta

import pytest

from onetime_access.application.interfaces import ConsumeOutcome
from onetime_access.application.services import OneTimeAccessService
from onetime_access.domain.enums import CredentialState, InactiveReason
from onetime_access.domain.exceptions import (
    CredentialAlreadyConsumedException,
    CredentialNotFoundException,
    InvalidConfigurationException,
    InvalidCredentialsException,
    MissingFieldsException,
    StoreUnavailableException,
)
from tests.fakes import T0, InMemoryCredentialStore, make_credential


class TestLogin:
    async def test_success_consumes_and_returns_session(self, service, store, clock) -> None:
        store.add(make_credential(duration_hours=24))
        result = await service.login("guest", "s3cret")

        assert len(result.token) == 32
        int(result.token, 16)
        assert result.expires_at == T0 + timedelta(hours=24)
        record = store.records["cred-a"]
        assert record.used_at == T0
        assert record.session_token == result.token
        assert record.session_expires_at == result.expires_at

    async def test_second_login_is_already_consumed(self, service, store) -> None:
        store.add(make_credential())
        first = await service.login("guest", "s3cret")
        with pytest.raises(CredentialAlreadyConsumedException):
            await service.login("guest", "s3cret")
        assert store.records["cred-a"].session_token == first.token

    async def test_consumed_wins_over_wrong_password(self, service, store) -> None:
        store.add(make_credential())
        await service.login("guest", "s3cret")
        with pytest.raises(CredentialAlreadyConsumedException):
            await service.login("guest", "wrong")

    async def test_concurrent_logins_exactly_one_wins(self, service, store) -> None:
        store.add(make_credential())
        results = await asyncio.gather(
            service.login("guest", "s3cret"),
            service.login("guest", "s3cret"),
            return_exceptions=True,
        )
        sessions = [r for r in results if not isinstance(r, Exception)]
        errors = [r for r in results if isinstance(r, Exception)]
        assert len(sessions) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], CredentialAlreadyConsumedException)
        assert store.records["cred-a"].session_token == sessions[0].token

    async def test_wrong_password_leaves_record_unconsumed(self, service, store) -> None:
        store.add(make_credential())
        with pytest.raises(InvalidCredentialsException):
            await service.login("guest", "nope")
        record = store.records["cred-a"]
        assert record.used_at is None
        assert record.session_token is None
        # still usable with the right password
        await service.login("guest", "s3cret")

    async def test_unknown_username(self, service) -> None:
        with pytest.raises(CredentialNotFoundException) as exc_info:
            await service.login("nobody", "x")
        assert exc_info.value.message == "No active credentials"

    @pytest.mark.parametrize(
        ("username", "password", "missing"),
        [
            ("", "pw", ["username"]),
            ("guest", "", ["password"]),
            (None, None, ["username", "password"]),
        ],
    )
    async def test_missing_credentials(self, service, username, password, missing) -> None:
        with pytest.raises(MissingFieldsException) as exc_info:
            await service.login(username, password)
        assert exc_info.value.message == "Missing credentials"
        assert exc_info.value.details == {"fields": missing}

    @pytest.mark.parametrize("duration", [None, 0, -3])
    async def test_invalid_duration_does_not_consume(self, service, store, duration) -> None:
        store.add(make_credential(duration_hours=duration))
        with pytest.raises(InvalidConfigurationException):
            await service.login("guest", "s3cret")
        assert store.records["cred-a"].used_at is None

    async def test_revoked_between_read_and_write(self, clock) -> None:
        class RevokedDuringLogin(InMemoryCredentialStore):
            async def consume(self, *args, **kwargs):
                return ConsumeOutcome.NOT_FOUND

        store = RevokedDuringLogin()
        store.add(make_credential())
        with pytest.raises(CredentialNotFoundException):
            await OneTimeAccessService(store, clock=clock).login("guest", "s3cret")

    async def test_store_failure_propagates(self, service, store) -> None:
        store.add(make_credential())
        store.fail = True
        with pytest.raises(StoreUnavailableException):
            await service.login("guest", "s3cret")


class TestValidate:
    async def test_active_right_after_login(self, service, store) -> None:
        store.add(make_credential(duration_hours=1))
        session = await service.login("guest", "s3cret")
        outcome = await service.validate(session.token)
        assert outcome.active is True
        assert outcome.expires_at == session.expires_at
        assert outcome.reason is None

    async def test_expiry_is_computed_not_written(self, service, store, clock) -> None:
        store.add(make_credential(duration_hours=1))
        session = await service.login("guest", "s3cret")
        before = store.records["cred-a"]

        clock.advance(hours=1, seconds=1)
        outcome = await service.validate(session.token)

        assert outcome.active is False
        assert outcome.reason is InactiveReason.EXPIRED
        assert outcome.expires_at is None
        assert store.records["cred-a"] == before

    async def test_24_hour_window_boundaries(self, service, store, clock) -> None:
        store.add(make_credential(duration_hours=24))
        session = await service.login("guest", "s3cret")
        assert session.expires_at == T0 + timedelta(hours=24)

        clock.now = T0 + timedelta(hours=24) - timedelta(seconds=1)
        assert (await service.validate(session.token)).active is True
        clock.now = T0 + timedelta(hours=24)
        assert (await service.validate(session.token)).active is True
        clock.now = T0 + timedelta(hours=24, seconds=1)
        assert (await service.validate(session.token)).active is False

    async def test_unknown_token_is_inactive(self, service, store) -> None:
        store.add(make_credential())
        outcome = await service.validate("0" * 32)
        assert outcome.active is False
        assert outcome.reason is InactiveReason.NOT_FOUND

    @pytest.mark.parametrize("token", [None, ""])
    async def test_missing_token_is_inactive(self, service, token) -> None:
        outcome = await service.validate(token)
        assert outcome.active is False
        assert outcome.reason is InactiveReason.MISSING_TOKEN

    async def test_store_failure_fails_closed(self, service, store) -> None:
        store.add(make_credential())
        session = await service.login("guest", "s3cret")
        store.fail = True
        outcome = await service.validate(session.token)
        assert outcome.active is False
        assert outcome.reason is InactiveReason.STORE_ERROR

    async def test_unexpected_error_fails_closed(self, clock) -> None:
        class Broken(InMemoryCredentialStore):
            async def get_by_session_token(self, token):
                raise RuntimeError("boom")

        outcome = await OneTimeAccessService(Broken(), clock=clock).validate("abc")
        assert outcome.active is False
        assert outcome.reason is InactiveReason.STORE_ERROR

    async def test_revocation_invalidates_session(self, service, store) -> None:
        store.add(make_credential())
        session = await service.login("guest", "s3cret")
        await service.revoke("cred-a")
        outcome = await service.validate(session.token)
        assert outcome.active is False
        assert outcome.reason is InactiveReason.NOT_FOUND


class TestAdministration:
    async def test_issue_stores_hash_not_password(self, service, store) -> None:
        result = await service.issue("visitor", "hello", 2)
        record = store.records[result.id]
        assert record.password_hash == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )
        assert record.used_at is None
        assert result.state is CredentialState.UNCONSUMED
        assert result.created_at == T0
        assert not hasattr(result, "password_hash")
        assert not hasattr(result, "session_token")

    async def test_issued_credential_can_log_in(self, service) -> None:
        await service.issue("visitor", "hello", 2)
        session = await service.login("visitor", "hello")
        assert session.expires_at == T0 + timedelta(hours=2)

    @pytest.mark.parametrize(
        ("username", "password", "duration", "missing"),
        [
            ("", "pw", 1, ["username"]),
            ("u", None, 1, ["password"]),
            ("u", "pw", 0, ["durationHours"]),
            ("u", "pw", None, ["durationHours"]),
            ("u", "pw", True, ["durationHours"]),
            (None, "", -1, ["username", "password", "durationHours"]),
        ],
    )
    async def test_issue_missing_fields(
        self, service, store, username, password, duration, missing
    ) -> None:
        with pytest.raises(MissingFieldsException) as exc_info:
            await service.issue(username, password, duration)
        assert exc_info.value.message == "Missing fields"
        assert exc_info.value.details["fields"] == missing
        assert store.records == {}

    async def test_update_overwrites_fields_but_not_session(self, service, store) -> None:
        store.add(make_credential())
        session = await service.login("guest", "s3cret")
        await service.update("cred-a", "renamed", "newpw", 48)

        record = store.records["cred-a"]
        assert record.username == "renamed"
        assert record.password_hash == service._hash.hash_password("newpw")
        assert record.duration_hours == 48
        assert record.session_token == session.token
        assert (await service.validate(session.token)).active is True

    async def test_update_unknown_id(self, service) -> None:
        with pytest.raises(CredentialNotFoundException):
            await service.update("missing", "u", "p", 1)

    async def test_update_validates_before_writing(self, service, store) -> None:
        store.add(make_credential())
        with pytest.raises(MissingFieldsException):
            await service.update("cred-a", "u", "p", 0)
        assert store.records["cred-a"].username == "guest"

    async def test_revoke_is_idempotent(self, service, store) -> None:
        store.add(make_credential())
        await service.revoke("cred-a")
        await service.revoke("cred-a")
        assert store.records == {}

    async def test_list_newest_first_with_state(self, service, store, clock) -> None:
        store.add(make_credential(id="old", username="a", created_at=T0))
        store.add(make_credential(id="new", username="b", created_at=T0 + timedelta(hours=1)))
        await service.login("a", "s3cret")

        items = await service.list_credentials()
        assert [i.id for i in items] == ["new", "old"]
        assert items[0].state is CredentialState.UNCONSUMED
        assert items[1].state is CredentialState.ACTIVE

        clock.advance(days=2)
        items = await service.list_credentials()
        assert items[1].state is CredentialState.EXPIRED

    async def test_get_credential(self, service, store) -> None:
        store.add(make_credential())
        result = await service.get_credential("cred-a")
        assert result.username == "guest"
        with pytest.raises(CredentialNotFoundException):
            await service.get_credential("nope")
