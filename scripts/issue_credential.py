"""Issue a one-time credential through the configured store (Firestore or Postgres).

Usage:
    python -m scripts.issue_credential <username> <hours> [password]
If password is omitted, a random one is printed.
"""

import asyncio
import secrets
import sys

from onetime_access.application.services import OneTimeAccessService
from onetime_access.core.config import get_settings
from onetime_access.domain.exceptions import OneTimeAccessException
from onetime_access.infrastructure.firebase import create_firestore_client
from onetime_access.infrastructure.firebase.repositories import FirestoreCredentialStore
from onetime_access.infrastructure.persistence import database
from onetime_access.infrastructure.persistence.repositories import CredentialRepository
from onetime_access.shared.utils.datetime import isoformat_utc


async def main() -> None:
    """Issue one credential and print its id and password."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.issue_credential <username> <hours> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    username = sys.argv[1]
    try:
        hours = int(sys.argv[2])
    except ValueError:
        print(f"hours must be an integer, got {sys.argv[2]!r}", file=sys.stderr)
        sys.exit(1)
    password = sys.argv[3] if len(sys.argv) > 3 else secrets.token_urlsafe(12)

    settings = get_settings()
    client = None
    if settings.database_backend == "postgres":
        store = CredentialRepository()
    else:
        client = create_firestore_client()
        if client is None:
            print("Firestore client could not be created (check service account)", file=sys.stderr)
            sys.exit(1)
        store = FirestoreCredentialStore(client)

    try:
        result = await OneTimeAccessService(store).issue(username, password, hours)
    except OneTimeAccessException as e:
        print(f"{e.error_code}: {e.message} {e.details}", file=sys.stderr)
        sys.exit(1)
    finally:
        if client is not None:
            await client.aclose()
        await database.dispose_engine()

    print(f"Issued credential {result.id} for {result.username} ({hours}h), created {isoformat_utc(result.created_at)}")
    print(f"Password: {password}")


if __name__ == "__main__":
    asyncio.run(main())
