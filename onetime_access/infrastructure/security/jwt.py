"""Bearer tokens for the administrative API.

Signed with SECRET_KEY. One-time session tokens are opaque random values
and never pass through here.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from onetime_access.core.config import get_settings
from onetime_access.shared.utils.datetime import utc_now


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Sign ``data`` with an ``exp`` claim added.

    Args:
        data: Claims; ``sub`` plus ``role`` and/or ``email`` for the admin gate.
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    settings = get_settings()
    lifetime = (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {**data, "exp": utc_now() + lifetime}
    return cast(
        str,
        jwt.encode(
            claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm
        ),
    )


def verify_token(token: str) -> dict[str, Any]:
    """Decode a signed token; ``exp`` and ``sub`` must be present.

    Raises:
        ValueError: bad signature, expired, malformed, or missing claims.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}") from e


def is_admin_claims(payload: dict[str, Any]) -> bool:
    """True if the claims carry ADMIN_ROLE or an e-mail listed in ADMIN_EMAILS."""
    settings = get_settings()
    if payload.get("role") == settings.admin_role:
        return True
    email = payload.get("email")
    return isinstance(email, str) and email.strip().lower() in settings.admin_email_list
