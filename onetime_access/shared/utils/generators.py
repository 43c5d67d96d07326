"""ID and value generators (CUID for record ids, hex session tokens)."""

import secrets

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# 16 random bytes -> 32 hex characters.
SESSION_TOKEN_BYTES = 16


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2).

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_session_token() -> str:
    """Return a fresh session token: 16 cryptographically random bytes, hex-encoded.

    Collisions are not checked against existing tokens (2**128 space).
    """
    return secrets.token_hex(SESSION_TOKEN_BYTES)
