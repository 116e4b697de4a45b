"""Domain entities with business logic."""

from .user import PROFILE_FIELDS, User

__all__ = ["User", "PROFILE_FIELDS"]
