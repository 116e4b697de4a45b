"""
Domain Layer - Pure Credential Logic

This layer contains:
- Entities: the user record and its reset-state invariants
- Services: password policy
- Exceptions: the error kinds surfaced to callers

No external dependencies allowed in this layer.
"""

from .entities import User
from .exceptions import (
    ConflictError,
    CredentialException,
    DeliveryFailedError,
    ErrorKind,
    InvalidCredentialError,
    InvalidSessionTokenError,
    MissingCredentialError,
    ResetTokenExpiredError,
    ResetTokenInvalidError,
    UserNotFoundError,
    ValidationError,
)
from .services import PasswordPolicy

__all__ = [
    "User",
    "PasswordPolicy",
    "ErrorKind",
    "CredentialException",
    "ValidationError",
    "ConflictError",
    "UserNotFoundError",
    "InvalidCredentialError",
    "ResetTokenInvalidError",
    "ResetTokenExpiredError",
    "DeliveryFailedError",
    "MissingCredentialError",
    "InvalidSessionTokenError",
]
