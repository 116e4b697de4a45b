"""Application services."""

from .reset_token_manager import ResetTokenManager, utc_now

__all__ = ["ResetTokenManager", "utc_now"]
