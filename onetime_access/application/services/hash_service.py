"""Hash service for one-time credential passwords (algorithm is pluggable)."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod


class HashAlgorithm(ABC):
    """Abstract hash algorithm (OCP)."""

    @abstractmethod
    def hash(self, data: str) -> str:
        """Compute hash of input string."""
        ...


class SHA256Algorithm(HashAlgorithm):
    """SHA-256 implementation (64 hex chars)."""

    def hash(self, data: str) -> str:
        return hashlib.sha256(data.encode("utf-8")).hexdigest()


class HashService:
    """Single source of truth for credential password hashing.

    Stored hashes are unsalted SHA-256 hex digests so records written by
    earlier deployments keep verifying. Plaintext is never stored.
    """

    def __init__(self, algorithm: HashAlgorithm | None = None) -> None:
        self.algorithm = algorithm or SHA256Algorithm()

    def hash_password(self, password: str) -> str:
        return self.algorithm.hash(password)
