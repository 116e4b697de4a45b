"""
Domain-level exceptions for the credential lifecycle.

Every exception carries an ErrorKind so callers (the HTTP router, tests)
can react to the category of failure without matching on messages.
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Categories of failure reported by the credential core."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIAL = "invalid_credential"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    DELIVERY_FAILED = "delivery_failed"
    STORE_UNAVAILABLE = "store_unavailable"
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_TOKEN = "invalid_token"


class CredentialException(Exception):
    """Base exception for all credential-core errors."""

    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(CredentialException):
    """
    Raised when required input is missing or malformed.

    ``errors`` holds one message per offending field so the caller can
    report all of them at once.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        field: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = list(errors)
        super().__init__(message, details)
        self.errors = list(errors) if errors else [message]
        self.field = field


class ConflictError(CredentialException):
    """Raised when a national identifier or email is already registered."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str = "User already registered") -> None:
        super().__init__(message)


class UserNotFoundError(CredentialException):
    """Raised when a lookup by email or id finds no user."""

    kind = ErrorKind.USER_NOT_FOUND

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class InvalidCredentialError(CredentialException):
    """Raised when the supplied password does not match the stored hash."""

    kind = ErrorKind.INVALID_CREDENTIAL

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


class ResetTokenInvalidError(CredentialException):
    """Raised when no reset is pending or the supplied reset token differs."""

    kind = ErrorKind.TOKEN_INVALID

    def __init__(self, message: str = "The supplied reset token is not valid") -> None:
        super().__init__(message)


class ResetTokenExpiredError(CredentialException):
    """Raised when the pending reset token is past its expiry."""

    kind = ErrorKind.TOKEN_EXPIRED

    def __init__(
        self, message: str = "The supplied reset token has expired, please request a new one"
    ) -> None:
        super().__init__(message)


class DeliveryFailedError(CredentialException):
    """Raised when the mail dispatcher could not deliver a message."""

    kind = ErrorKind.DELIVERY_FAILED

    def __init__(
        self,
        message: str = "Could not send the password recovery email",
        reason: str | None = None,
    ) -> None:
        super().__init__(message, {"reason": reason} if reason else None)
        self.reason = reason


class MissingCredentialError(CredentialException):
    """Raised when a request carries no session token at all."""

    kind = ErrorKind.MISSING_CREDENTIAL

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class InvalidSessionTokenError(CredentialException):
    """Raised when a session token fails signature or structure checks."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)
