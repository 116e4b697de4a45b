"""Structured logging and request correlation."""

from .logging import (
    AuthContextFilter,
    AuthJSONFormatter,
    SensitiveDataConfig,
    SensitiveDataMasker,
    correlation_context,
    generate_correlation_id,
    get_correlation_id,
    mask_sensitive_data,
    setup_structured_logging,
    user_context,
)

__all__ = [
    "AuthContextFilter",
    "AuthJSONFormatter",
    "SensitiveDataConfig",
    "SensitiveDataMasker",
    "correlation_context",
    "generate_correlation_id",
    "get_correlation_id",
    "mask_sensitive_data",
    "setup_structured_logging",
    "user_context",
]
