"""
Session token service.

Issues and verifies compact, stateless HS256 JWT session tokens bound to a
user id. The signing secret is injected at construction; the key id is
carried in the token header so rotating the key invalidates every token
issued under the previous one.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt

from tranquilo_auth.domain.exceptions import InvalidSessionTokenError, MissingCredentialError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header value.

    Returns None when the header is absent, has no token part, or uses a
    scheme other than Bearer.
    """
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        return None
    return parts[1].strip() or None


class SessionTokenService:
    """
    JWT service for creating and validating session tokens.

    Supports:
    - Stateless HS256 signing with an injected secret
    - Versioned key id in the token header
    - Optional expiry (tokens never expire unless a TTL is configured)
    """

    def __init__(
        self,
        secret: str,
        key_id: str = "v1",
        token_ttl_minutes: int | None = None,
    ):
        """
        Initialize session token service.

        Args:
            secret: Process-wide signing secret
            key_id: Identifier of the signing key, embedded as ``kid``
            token_ttl_minutes: Token lifetime; None issues non-expiring tokens
        """
        if not secret:
            raise ValueError("A session token secret is required")

        self.algorithm = "HS256"
        self._secret = secret
        self.key_id = key_id
        self.token_ttl = timedelta(minutes=token_ttl_minutes) if token_ttl_minutes else None

    def issue(self, user_id: UUID | str) -> str:
        """
        Create a signed session token.

        Args:
            user_id: User identifier

        Returns:
            Signed JWT session token
        """
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "id": str(user_id),
            "iat": now,
        }
        if self.token_ttl is not None:
            payload["exp"] = now + self.token_ttl

        token = jwt.encode(
            payload,
            self._secret,
            algorithm=self.algorithm,
            headers={"kid": self.key_id},
        )

        logger.debug("Issued session token", extra={"user_id": str(user_id)})
        return token

    def verify(self, token: str | None) -> str:
        """
        Verify a session token and return the user id it is bound to.

        Args:
            token: JWT session token

        Returns:
            User id from the ``sub`` claim

        Raises:
            MissingCredentialError: If no token was supplied
            InvalidSessionTokenError: If the token is malformed, badly signed,
                signed under another key id, or expired
        """
        if not token:
            raise MissingCredentialError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat"]},
            )
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected session token: {type(e).__name__}")
            raise InvalidSessionTokenError() from e

        if header.get("kid") != self.key_id:
            logger.info("Rejected session token signed under a retired key id")
            raise InvalidSessionTokenError()

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidSessionTokenError()

        return user_id
