"""
User Entity - account record with credential and reset state
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

# Profile fields are opaque to the core beyond their presence
PROFILE_FIELDS = ("name", "state", "city", "street", "district", "number", "phone")


@dataclass
class User:
    """
    User entity representing a registered account.

    The password is only ever held as a bcrypt hash. The reset token and its
    expiry form a pair: both are set while a reset is pending and both are
    cleared once it is consumed.
    """

    # Identity
    id: UUID = field(default_factory=uuid4)
    cpf: str = ""
    email: str = ""

    # Profile
    name: str = ""
    state: str = ""
    city: str = ""
    street: str = ""
    district: str = ""
    number: str = ""
    phone: str = ""

    # Credential
    password_hash: str = ""

    # Password reset
    reset_token: str | None = None
    reset_expires_at: datetime | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate the reset pair invariant."""
        if (self.reset_token is None) != (self.reset_expires_at is None):
            raise ValueError("reset_token and reset_expires_at must be set or cleared together")

    @classmethod
    def create(cls, fields: dict[str, Any], password_hash: str) -> User:
        """Build a new user from registration fields and an already hashed password."""
        return cls(
            cpf=str(fields["cpf"]),
            email=str(fields["email"]),
            password_hash=password_hash,
            **{name: str(fields[name]) for name in PROFILE_FIELDS},
        )

    @property
    def has_pending_reset(self) -> bool:
        return self.reset_token is not None

    def reset_token_matches(self, supplied_token: str) -> bool:
        """Exact, constant-time comparison against the pending reset token."""
        if self.reset_token is None:
            return False
        return secrets.compare_digest(
            self.reset_token.encode("utf-8"), supplied_token.encode("utf-8")
        )

    def reset_is_expired(self, now: datetime) -> bool:
        if self.reset_expires_at is None:
            return True
        return now > self.reset_expires_at

    def public_profile(self) -> dict[str, Any]:
        """Profile safe to return to callers: no credential or reset fields."""
        profile: dict[str, Any] = {
            "id": str(self.id),
            "cpf": self.cpf,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }
        profile.update({name: getattr(self, name) for name in PROFILE_FIELDS})
        return profile

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r}, pending_reset={self.has_pending_reset})"
