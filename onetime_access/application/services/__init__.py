"""Application services (use cases)."""

from onetime_access.application.services.hash_service import (
    HashAlgorithm,
    HashService,
    SHA256Algorithm,
)
from onetime_access.application.services.one_time_access_service import (
    OneTimeAccessService,
)

__all__ = [
    "HashAlgorithm",
    "HashService",
    "OneTimeAccessService",
    "SHA256Algorithm",
]
