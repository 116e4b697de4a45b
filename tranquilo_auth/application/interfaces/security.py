"""
Security Interfaces

Contracts for the credential hasher and the session token issuer used by
the use cases.
"""

from abc import abstractmethod
from typing import Protocol
from uuid import UUID


class ICredentialHasher(Protocol):
    """One-way password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash; malformed hashes never match."""
        ...


class ISessionTokenIssuer(Protocol):
    """Issues and verifies stateless session tokens."""

    @abstractmethod
    def issue(self, user_id: UUID | str) -> str:
        """Create a signed token bound to ``user_id``."""
        ...

    @abstractmethod
    def verify(self, token: str | None) -> str:
        """
        Return the user id the token was issued for.

        Raises:
            MissingCredentialError: If no token was supplied
            InvalidSessionTokenError: If the token cannot be trusted
        """
        ...
