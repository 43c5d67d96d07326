"""Domain entities."""

from onetime_access.domain.entities.credential import CredentialEntity

__all__ = ["CredentialEntity"]
