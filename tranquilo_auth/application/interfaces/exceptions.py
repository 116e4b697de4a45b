"""
Repository Exception Definitions

Defines exceptions that directory store implementations may raise.
Following clean architecture principles - these are application-level exceptions.
"""

from uuid import UUID


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StoreUnavailableError(RepositoryError):
    """Raised when the directory store cannot be reached or a query fails."""

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        super().__init__(f"Directory store unavailable during {operation}", cause)
        self.operation = operation


class DuplicateUserError(RepositoryError):
    """Raised when an insert violates the email or national identifier uniqueness."""

    def __init__(self, identifier: UUID | str, cause: Exception | None = None) -> None:
        super().__init__(f"User with identifier '{identifier}' already exists", cause)
        self.identifier = identifier
