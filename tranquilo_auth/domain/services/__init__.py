"""Domain services."""

from .password_policy import PasswordPolicy

__all__ = ["PasswordPolicy"]
