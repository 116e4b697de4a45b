"""
Structured Logging for the credential service

JSON structured logs with correlation IDs, user context, OpenTelemetry
trace ids and sensitive data masking. Passwords, reset tokens and session
tokens are dropped or masked before a record is written.
"""

import json
import logging
import re
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

# Context variables for correlation tracking
correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)

AUTH_SCHEMES = r"(?:bearer|basic)"

BARE_BEARER_PATTERN = re.compile(r"(?P<scheme>\bbearer\s+)\S+", re.IGNORECASE)


@dataclass
class SensitiveDataConfig:
    """Configuration for sensitive data masking."""

    # Credentials and secrets
    credential_patterns: list[str] = field(
        default_factory=lambda: [
            r"authorization",
            r"bearer",
            r"access[_-]?token",
            r"reset[_-]?token",
            r"secret[_-]?key",
            r"api[_-]?key",
        ]
    )

    # Personal data
    personal_patterns: list[str] = field(
        default_factory=lambda: [
            r"cpf",
            r"phone",
        ]
    )

    # Replacement text
    mask_replacement: str = "***MASKED***"

    # Fields to completely exclude from logs
    excluded_fields: set[str] = field(
        default_factory=lambda: {
            "password",
            "confirmpassword",
            "new_password",
            "password_hash",
            "token",
            "secret",
        }
    )


class AuthContextFilter(logging.Filter):
    """
    Adds correlation, user and tracing context to every record.

    Values passed explicitly through ``extra`` take precedence over the
    context variables.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = correlation_id_var.get()
        if not getattr(record, "user_id", None):
            record.user_id = user_id_var.get()

        span = trace.get_current_span()
        if span.is_recording():
            span_context = span.get_span_context()
            record.trace_id = format(span_context.trace_id, "032x") if span_context.trace_id else None
            record.span_id = format(span_context.span_id, "016x") if span_context.span_id else None

        return True


class SensitiveDataMasker:
    """Masks sensitive data in log messages and extra fields."""

    def __init__(self, config: SensitiveDataConfig) -> None:
        self.config = config
        self._patterns = self.config.credential_patterns + self.config.personal_patterns
        self._compiled_patterns = self._compile_patterns()

    def _compile_patterns(self) -> list[re.Pattern[str]]:
        """Compile all sensitive data patterns."""
        compiled = []
        for pattern in self._patterns:
            try:
                # Match "key": "value", key=value and key: value pairs; a
                # scheme such as "Bearer" is masked together with its token
                full_pattern = (
                    rf'(?P<quoted>"{pattern}":\s*)"[^"]*"'
                    rf"|(?P<assigned>{pattern}=)(?:{AUTH_SCHEMES}\s+)?\S+"
                    rf"|(?P<labelled>{pattern}:\s*)(?:{AUTH_SCHEMES}\s+)?\S+"
                )
                compiled.append(re.compile(full_pattern, re.IGNORECASE))
            except re.error as e:
                logging.getLogger(__name__).warning(f"Invalid regex pattern '{pattern}': {e}")

        return compiled

    def mask_message(self, message: str) -> str:
        """Mask sensitive data in log message."""
        masked_message = message

        for pattern in self._compiled_patterns:
            masked_message = pattern.sub(self._replace_value, masked_message)

        # Bearer credentials not preceded by a key
        return BARE_BEARER_PATTERN.sub(
            lambda m: f"{m.group('scheme')}{self.config.mask_replacement}", masked_message
        )

    def mask_extra_fields(self, extra: dict[str, Any]) -> dict[str, Any]:
        """Mask sensitive data in extra log fields."""
        if not extra:
            return extra

        masked_extra: dict[str, Any] = {}

        for key, value in extra.items():
            if key.lower() in self.config.excluded_fields:
                continue

            if self._is_sensitive_field(key):
                masked_extra[key] = self.config.mask_replacement
            elif isinstance(value, str):
                masked_extra[key] = self.mask_message(value)
            elif isinstance(value, dict):
                masked_extra[key] = self.mask_extra_fields(value)
            else:
                masked_extra[key] = value

        return masked_extra

    def _is_sensitive_field(self, field_name: str) -> bool:
        field_lower = field_name.lower()
        return any(re.search(pattern, field_lower) for pattern in self._patterns)

    def _replace_value(self, match: re.Match[str]) -> str:
        """Replace matched value with mask, keeping the key."""
        if match.group("assigned"):
            return f"{match.group('assigned')}{self.config.mask_replacement}"
        key_part = (match.group("quoted") or match.group("labelled")).rstrip()[:-1]
        return f'{key_part}: "{self.config.mask_replacement}"'


class AuthJSONFormatter(logging.Formatter):
    """JSON formatter for structured logs."""

    STANDARD_FIELDS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "correlation_id",
        "user_id",
        "trace_id",
        "span_id",
    }

    def __init__(
        self,
        sensitive_data_config: SensitiveDataConfig | None = None,
        include_extra: bool = True,
        sort_keys: bool = True,
    ):
        super().__init__()
        self.include_extra = include_extra
        self.sort_keys = sort_keys
        self.masker = SensitiveDataMasker(sensitive_data_config or SensitiveDataConfig())

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self.masker.mask_message(record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for context_field in ("correlation_id", "user_id", "trace_id", "span_id"):
            value = getattr(record, context_field, None)
            if value:
                log_entry[context_field] = str(value)

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_extra:
            extra = {
                key: self._serialize_value(value)
                for key, value in record.__dict__.items()
                if key not in self.STANDARD_FIELDS and not key.startswith("_")
            }
            if extra:
                log_entry["extra"] = self.masker.mask_extra_fields(extra)

        return json.dumps(log_entry, sort_keys=self.sort_keys, default=self._serialize_value)

    def _serialize_value(self, value: Any) -> Any:
        """Serialize complex values for JSON output."""
        if isinstance(value, datetime):
            return value.isoformat()
        elif isinstance(value, (set, frozenset)):
            return list(value)
        elif isinstance(value, uuid.UUID):
            return str(value)
        elif hasattr(value, "__dict__"):
            return str(value)
        return value


# Correlation ID management
def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str | None:
    """Get current correlation ID."""
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Context manager for correlation ID scope."""
    if correlation_id is None:
        correlation_id = generate_correlation_id()

    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


@contextmanager
def user_context(user_id: str) -> Generator[None, None, None]:
    """Context manager for authenticated user scope."""
    token = user_id_var.set(user_id)
    try:
        yield
    finally:
        user_id_var.reset(token)


def mask_sensitive_data(
    data: str | dict[str, Any], config: SensitiveDataConfig | None = None
) -> str | dict[str, Any]:
    """Utility function to mask sensitive data."""
    masker = SensitiveDataMasker(config or SensitiveDataConfig())

    if isinstance(data, str):
        return masker.mask_message(data)
    return masker.mask_extra_fields(data)


def setup_structured_logging(
    level: str = "INFO",
    format_type: str = "json",
    sensitive_data_config: SensitiveDataConfig | None = None,
    log_file: str | None = None,
) -> None:
    """
    Setup structured logging for the service.

    Args:
        level: Logging level
        format_type: Formatter type ('json' or 'text')
        sensitive_data_config: Sensitive data masking configuration
        log_file: Optional log file path
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter: logging.Formatter
    if format_type == "json":
        formatter = AuthJSONFormatter(sensitive_data_config)
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    context_filter = AuthContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, level.upper()))

    logging.getLogger(__name__).info("Structured logging configured")
