"""
Password hashing service.

Bcrypt hashing with a random salt and a tunable cost factor. The encoded
hash embeds algorithm identifier, cost, salt and digest.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12

# bcrypt only consumes the first 72 bytes; longer input is refused
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Bcrypt password hashing utility."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """Initialize with bcrypt rounds (cost factor)."""
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            ValueError: If the password is longer than 72 UTF-8 bytes
        """
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(encoded, salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify a password against its hash.

        Malformed hashes never match, and neither do passwords longer than
        bcrypt accepts since no stored hash can come from one.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Password verification against malformed hash: {e}")
            return False
