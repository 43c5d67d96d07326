"""Mint an admin bearer token for the credential management endpoints.

Usage:
    python -m scripts.create_admin_token <subject> [email] [--minutes N]
The token carries role=<ADMIN_ROLE>; email (if given) is informational
unless it is also listed in ADMIN_EMAILS.
"""

import argparse
from datetime import timedelta

from onetime_access.core.config import get_settings
from onetime_access.infrastructure.security.jwt import create_access_token


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("subject")
    parser.add_argument("email", nargs="?")
    parser.add_argument("--minutes", type=int, default=None)
    args = parser.parse_args()

    claims = {"sub": args.subject, "role": get_settings().admin_role}
    if args.email:
        claims["email"] = args.email
    expires = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_access_token(claims, expires_delta=expires))


if __name__ == "__main__":
    main()
