"""
Application Configuration - Central configuration management.

Settings are read from environment variables (a local .env file is loaded
when present) into one dataclass per concern.
"""

import logging
import os
import secrets
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


@dataclass
class DatabaseConfig:
    """Database configuration."""

    url: str = "sqlite:///./tranquilo_auth.db"
    echo: bool = False

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create configuration from environment variables."""
        return cls(
            url=os.getenv("DATABASE_URL", "sqlite:///./tranquilo_auth.db"),
            echo=_env_bool("DB_ECHO", "false"),
        )


@dataclass
class SecurityConfig:
    """Credential hashing, session token and reset token settings."""

    token_secret: str = ""
    token_key_id: str = "v1"
    session_token_ttl_minutes: int | None = None
    bcrypt_rounds: int = 12
    reset_token_ttl_minutes: int = 60
    reset_token_bytes: int = 20

    @classmethod
    def from_env(cls) -> "SecurityConfig":
        """Create configuration from environment variables."""
        return cls(
            token_secret=os.getenv("SESSION_TOKEN_SECRET") or os.getenv("SECRET", ""),
            token_key_id=os.getenv("SESSION_TOKEN_KEY_ID", "v1"),
            session_token_ttl_minutes=_env_optional_int("SESSION_TOKEN_TTL_MINUTES"),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            reset_token_ttl_minutes=int(os.getenv("RESET_TOKEN_TTL_MINUTES", "60")),
            reset_token_bytes=int(os.getenv("RESET_TOKEN_BYTES", "20")),
        )


@dataclass
class MailConfig:
    """SMTP relay configuration."""

    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    from_address: str = "tranquilopay@gmail.com"
    starttls: bool = True
    timeout: float = 15.0

    @classmethod
    def from_env(cls) -> "MailConfig":
        """Create configuration from environment variables."""
        return cls(
            smtp_host=os.getenv("SMTP_HOST") or None,
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            smtp_user=os.getenv("SMTP_USER") or None,
            smtp_password=os.getenv("SMTP_PASSWORD") or None,
            from_address=os.getenv("MAIL_FROM", "tranquilopay@gmail.com"),
            starttls=_env_bool("SMTP_STARTTLS", "true"),
            timeout=float(os.getenv("SMTP_TIMEOUT", "15.0")),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format_type: str = "json"
    file: str | None = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create configuration from environment variables."""
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format_type=os.getenv("LOG_FORMAT", "json"),
            file=os.getenv("LOG_FILE") or None,
        )


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
        )


@dataclass
class ApplicationConfig:
    """Main application configuration."""

    environment: Environment = Environment.DEVELOPMENT
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    mail: MailConfig = field(default_factory=MailConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls) -> "ApplicationConfig":
        """Load every section from the environment (and .env if present)."""
        load_dotenv()
        return cls(
            environment=Environment(os.getenv("ENVIRONMENT", "development")),
            database=DatabaseConfig.from_env(),
            security=SecurityConfig.from_env(),
            mail=MailConfig.from_env(),
            logging=LoggingConfig.from_env(),
            server=ServerConfig.from_env(),
        )

    def validate(self) -> bool:
        """
        Validate the configuration.

        Outside production a missing session token secret is replaced by an
        ephemeral one; tokens issued with it do not survive a restart.
        Production also requires an SMTP relay for password recovery email.

        Returns:
            True if valid, raises exception otherwise
        """
        if not self.security.token_secret:
            if self.environment == Environment.PRODUCTION:
                raise ValueError(
                    "SESSION_TOKEN_SECRET is required for production. "
                    "Generate one with: python -c 'import secrets; print(secrets.token_hex(32))'"
                )
            logger.warning(
                "No session token secret configured - generating an ephemeral secret for "
                "DEVELOPMENT ONLY. All session tokens are invalidated on restart!"
            )
            self.security.token_secret = secrets.token_hex(32)

        if self.security.bcrypt_rounds < 4 or self.security.bcrypt_rounds > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        if self.environment == Environment.PRODUCTION and self.security.bcrypt_rounds < 12:
            raise ValueError("BCRYPT_ROUNDS below 12 is not allowed in production")
        if self.security.reset_token_ttl_minutes <= 0:
            raise ValueError("RESET_TOKEN_TTL_MINUTES must be positive")
        if self.security.reset_token_bytes < 16:
            raise ValueError("RESET_TOKEN_BYTES must be at least 16")
        if self.environment == Environment.PRODUCTION and not self.mail.smtp_host:
            raise ValueError("SMTP_HOST is required for production to deliver reset emails")

        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary with secrets redacted."""
        return {
            "environment": self.environment.value,
            "database": {"url": self.database.url, "echo": self.database.echo},
            "security": {
                "token_secret": "***" if self.security.token_secret else "",
                "token_key_id": self.security.token_key_id,
                "session_token_ttl_minutes": self.security.session_token_ttl_minutes,
                "bcrypt_rounds": self.security.bcrypt_rounds,
                "reset_token_ttl_minutes": self.security.reset_token_ttl_minutes,
                "reset_token_bytes": self.security.reset_token_bytes,
            },
            "mail": {
                "smtp_host": self.mail.smtp_host,
                "smtp_port": self.mail.smtp_port,
                "smtp_user": self.mail.smtp_user,
                "from_address": self.mail.from_address,
                "starttls": self.mail.starttls,
            },
            "logging": {
                "level": self.logging.level,
                "format_type": self.logging.format_type,
                "file": self.logging.file,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "cors_origins": list(self.server.cors_origins),
            },
        }


# Global configuration singleton
_config: ApplicationConfig | None = None


def get_config() -> ApplicationConfig:
    """
    Get the application configuration singleton.

    Returns:
        ApplicationConfig: The application configuration
    """
    global _config
    if _config is None:
        _config = ApplicationConfig.from_env()
        _config.validate()
    return _config


def set_config(config: ApplicationConfig) -> None:
    """
    Set the application configuration.

    Args:
        config: The new configuration
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the configuration singleton."""
    global _config
    _config = None
