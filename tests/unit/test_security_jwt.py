"""Tests for admin JWT creation, verification and the admin-claims check."""

from datetime import timedelta

import pytest
from jose import jwt

from onetime_access.core.config import get_settings
from onetime_access.infrastructure.security.jwt import (
    create_access_token,
    is_admin_claims,
    verify_token,
)


def test_round_trip_keeps_claims() -> None:
    token = create_access_token({"sub": "op", "role": "admin"})
    payload = verify_token(token)
    assert payload["sub"] == "op"
    assert payload["role"] == "admin"
    assert "exp" in payload


def test_expired_token_rejected() -> None:
    token = create_access_token({"sub": "op"}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(token)


def test_token_without_sub_rejected() -> None:
    token = create_access_token({"role": "admin"})
    with pytest.raises(ValueError):
        verify_token(token)


def test_token_signed_with_other_key_rejected() -> None:
    forged = jwt.encode({"sub": "op", "role": "admin", "exp": 9999999999}, "other-key", "HS256")
    with pytest.raises(ValueError):
        verify_token(forged)


def test_is_admin_claims() -> None:
    role = get_settings().admin_role
    assert is_admin_claims({"sub": "a", "role": role}) is True
    assert is_admin_claims({"sub": "a", "role": "viewer"}) is False
    assert is_admin_claims({"sub": "a"}) is False
    assert is_admin_claims({"sub": "a", "email": 123}) is False
