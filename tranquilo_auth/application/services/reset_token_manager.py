"""
Password reset token management.

Generates single-use, time-limited reset secrets, persists them against the
user record, and validates and consumes them when a new password is set.

Per-user state machine::

    NoPendingReset --begin_reset--> PendingReset --complete_reset--> NoPendingReset
                                         |
                                         +--begin_reset (overwrite)--> PendingReset

A new ``begin_reset`` always replaces the previous token, so at most one
token per user is ever valid.
"""

import asyncio
import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from tranquilo_auth.application.interfaces.directory import IUserDirectory
from tranquilo_auth.application.interfaces.security import ICredentialHasher
from tranquilo_auth.domain.exceptions import (
    ResetTokenExpiredError,
    ResetTokenInvalidError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ResetTokenManager:
    """Reset token lifecycle service."""

    def __init__(
        self,
        directory: IUserDirectory,
        hasher: ICredentialHasher,
        token_ttl_minutes: int = 60,
        token_bytes: int = 20,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize the reset token manager.

        Args:
            directory: User directory store
            hasher: Credential hasher used when the new password is set
            token_ttl_minutes: Lifetime of a reset token
            token_bytes: Random bytes per token (hex encoded, 20 bytes = 160 bits)
            clock: Returns the current timezone-aware UTC time
        """
        self.directory = directory
        self.hasher = hasher
        self.token_ttl = timedelta(minutes=token_ttl_minutes)
        self.token_bytes = token_bytes
        self.clock = clock

    def generate_token(self) -> str:
        """Generate an unguessable reset token."""
        return secrets.token_hex(self.token_bytes)

    async def begin_reset(self, email: str) -> tuple[str, datetime]:
        """
        Start a password reset for the user registered under ``email``.

        Args:
            email: User email address

        Returns:
            Tuple of (reset_token, expires_at) for out-of-band delivery

        Raises:
            UserNotFoundError: If no user is registered with the email
        """
        user = await self.directory.find_by_email(email)
        if user is None:
            raise UserNotFoundError()

        token = self.generate_token()
        expires_at = self.clock() + self.token_ttl

        if not await self.directory.update_reset_fields(user.id, token, expires_at):
            # Row vanished between lookup and update
            raise UserNotFoundError()

        logger.info(
            "Password reset started", extra={"user_id": str(user.id), "expires_at": expires_at}
        )
        return token, expires_at

    async def complete_reset(self, email: str, supplied_token: str, new_password: str) -> None:
        """
        Consume a pending reset token and set a new password.

        The caller is responsible for checking ``new_password`` against the
        password policy beforehand.

        Args:
            email: User email address
            supplied_token: Token received out of band
            new_password: Plaintext password to hash and store

        Raises:
            UserNotFoundError: If no user is registered with the email
            ResetTokenInvalidError: If no reset is pending or the token differs
            ResetTokenExpiredError: If the pending token is past its expiry
        """
        user = await self.directory.find_by_email(email)
        if user is None:
            raise UserNotFoundError()

        if not user.has_pending_reset:
            raise ResetTokenInvalidError()

        if not user.reset_token_matches(supplied_token):
            logger.warning("Reset token mismatch", extra={"user_id": str(user.id)})
            raise ResetTokenInvalidError()

        if user.reset_is_expired(self.clock()):
            raise ResetTokenExpiredError()

        loop = asyncio.get_running_loop()
        password_hash = await loop.run_in_executor(None, self.hasher.hash, new_password)

        # Conditional on the token still pending, so it can be consumed only once
        updated = await self.directory.update_password_and_clear_reset(
            user.id, password_hash, expected_token=user.reset_token
        )
        if not updated:
            raise ResetTokenInvalidError()

        logger.info("Password reset completed", extra={"user_id": str(user.id)})
