"""
User Directory Interface

Defines the contract the persistent user store must implement.
"""

from abc import abstractmethod
from datetime import datetime
from typing import Protocol
from uuid import UUID

from tranquilo_auth.domain.entities import User


class IUserDirectory(Protocol):
    """
    User directory store interface.

    Every method raises StoreUnavailableError on transport or driver
    failure. Updates are single atomic statements; uniqueness of email and
    national identifier is enforced by the store itself.
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> User | None:
        """
        Retrieve a user by email.

        Args:
            email: The email address to look up

        Returns:
            The user if found, None otherwise
        """
        ...

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> User | None:
        """Retrieve a user by internal id."""
        ...

    @abstractmethod
    async def find_by_identifier_or_email(self, identifier: str, email: str) -> User | None:
        """
        Retrieve any user whose national identifier or email matches.

        Args:
            identifier: National identifier (cpf)
            email: Email address

        Returns:
            The first matching user, None if neither matches
        """
        ...

    @abstractmethod
    async def insert(self, user: User) -> UUID:
        """
        Persist a new user.

        Returns:
            The id of the stored user

        Raises:
            DuplicateUserError: If email or national identifier is taken
        """
        ...

    @abstractmethod
    async def update_reset_fields(self, user_id: UUID, token: str, expires_at: datetime) -> bool:
        """
        Set the pending reset token and expiry, replacing any previous pair.

        Returns:
            True if the user row was updated
        """
        ...

    @abstractmethod
    async def update_password_and_clear_reset(
        self, user_id: UUID, password_hash: str, expected_token: str | None = None
    ) -> bool:
        """
        Set a new password hash and clear both reset fields in one statement.

        Args:
            user_id: The user to update
            password_hash: New bcrypt hash
            expected_token: When given, the update only applies while this
                token is still the pending one

        Returns:
            True if the user row was updated
        """
        ...
