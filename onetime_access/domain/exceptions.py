"""Domain exceptions for the one-time access service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class OneTimeAccessException(Exception):
    """Base exception for all one-time access errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body: error code, message, and details."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class MissingFieldsException(OneTimeAccessException):
    """Raised when a required input is absent or empty."""

    def __init__(
        self, fields: list[str], message: str = "Missing fields"
    ) -> None:
        """Initialize with the names of the missing fields.

        Args:
            fields: Field names that were absent, empty, or out of range.
            message: Human-readable message shown to the caller.
        """
        super().__init__(message, "MISSING_FIELDS", {"fields": fields})


class CredentialNotFoundException(OneTimeAccessException):
    """Raised when no credential matches the given username or id."""

    def __init__(self, credential_id: str | None = None) -> None:
        details = {"credential_id": credential_id} if credential_id else {}
        super().__init__("No active credentials", "CREDENTIAL_NOT_FOUND", details)


class CredentialAlreadyConsumedException(OneTimeAccessException):
    """Raised when a credential exists but has already been exchanged for a session.

    Distinct from InvalidCredentialsException: retrying will never help.
    """

    def __init__(self) -> None:
        super().__init__("Credentials already used", "CREDENTIAL_ALREADY_CONSUMED")


class InvalidCredentialsException(OneTimeAccessException):
    """Raised when the password does not match the stored hash."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", "INVALID_CREDENTIALS")


class InvalidConfigurationException(OneTimeAccessException):
    """Raised when a stored credential has no usable duration (operator data-entry defect)."""

    def __init__(self, credential_id: str) -> None:
        super().__init__(
            "Invalid duration",
            "INVALID_CONFIGURATION",
            {"credential_id": credential_id},
        )


class StoreUnavailableException(OneTimeAccessException):
    """Raised when the backing credential store fails (network, driver, or server error)."""

    def __init__(self, operation: str, reason: str | None = None) -> None:
        """Initialize with the store operation that failed.

        Args:
            operation: Store operation name (e.g. 'get_by_username').
            reason: Optional short reason, kept out of the public message.
        """
        details: dict[str, Any] = {"operation": operation}
        if reason:
            details["reason"] = reason
        super().__init__("Internal error", "STORE_UNAVAILABLE", details)


class AuthenticationException(OneTimeAccessException):
    """Raised when admin authentication fails (missing, invalid, or expired token)."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(OneTimeAccessException):
    """Raised when an authenticated caller is not an administrator."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, "PERMISSION_DENIED")
