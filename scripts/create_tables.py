"""Create the one_time_access table (Postgres backend only).

Usage:
    DATABASE_BACKEND=postgres python -m scripts.create_tables
"""

import asyncio
import sys

from onetime_access.core.config import get_settings
from onetime_access.infrastructure.persistence import database


async def main() -> None:
    settings = get_settings()
    if settings.database_backend != "postgres":
        print("create_tables only applies to DATABASE_BACKEND=postgres", file=sys.stderr)
        sys.exit(1)
    try:
        await database.create_tables()
    finally:
        await database.dispose_engine()
    print("Tables created (existing tables left as they are)")


if __name__ == "__main__":
    asyncio.run(main())
