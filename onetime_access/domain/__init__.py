"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from onetime_access.domain.entities import CredentialEntity
from onetime_access.domain.enums import CredentialState, InactiveReason
from onetime_access.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CredentialAlreadyConsumedException,
    CredentialNotFoundException,
    InvalidConfigurationException,
    InvalidCredentialsException,
    MissingFieldsException,
    OneTimeAccessException,
    StoreUnavailableException,
)

__all__ = [
    # Entities
    "CredentialEntity",
    # Enums
    "CredentialState",
    "InactiveReason",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CredentialAlreadyConsumedException",
    "CredentialNotFoundException",
    "InvalidConfigurationException",
    "InvalidCredentialsException",
    "MissingFieldsException",
    "OneTimeAccessException",
    "StoreUnavailableException",
]
