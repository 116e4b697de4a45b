"""
Password strength policy.

Applied to every password before it is hashed, at registration and when a
reset sets a new password.
"""

import re


class PasswordPolicy:
    """Password strength validator."""

    MIN_LENGTH = 8

    # bcrypt ignores everything past 72 bytes
    MAX_BYTES = 72

    SYMBOLS = "~!@#$%^&*()_-+=|{}[]:;<>?,./"

    _SYMBOL_PATTERN = re.compile("[" + re.escape(SYMBOLS) + "]")

    @classmethod
    def validate(cls, password: str) -> tuple[bool, list[str]]:
        """
        Validate password strength.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        if len(password) < cls.MIN_LENGTH:
            errors.append(f"Password must be at least {cls.MIN_LENGTH} characters long")
        if len(password.encode("utf-8")) > cls.MAX_BYTES:
            errors.append(f"Password must be at most {cls.MAX_BYTES} bytes long")

        # Complexity checks
        if not re.search(r"[A-Z]", password):
            errors.append("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", password):
            errors.append("Password must contain at least one lowercase letter")
        if not re.search(r"\d", password):
            errors.append("Password must contain at least one number")
        if not cls._SYMBOL_PATTERN.search(password):
            errors.append(f"Password must contain at least one special character ({cls.SYMBOLS})")
        if re.search(r"\s", password):
            errors.append("Password must not contain whitespace")

        return len(errors) == 0, errors
