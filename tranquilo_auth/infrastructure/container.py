"""
Dependency Injection Container - Central container for application dependencies.

Wires the directory store, credential hasher, session token service, mail
dispatcher, reset token manager and use cases from an ApplicationConfig.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tranquilo_auth.application.interfaces.directory import IUserDirectory
from tranquilo_auth.application.interfaces.mail import IMailDispatcher
from tranquilo_auth.application.interfaces.security import ICredentialHasher, ISessionTokenIssuer
from tranquilo_auth.application.services import ResetTokenManager
from tranquilo_auth.application.use_cases import (
    CheckUserExistsUseCase,
    GetUserUseCase,
    LoginUseCase,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from tranquilo_auth.config import ApplicationConfig
from tranquilo_auth.infrastructure.auth.jwt_service import SessionTokenService
from tranquilo_auth.infrastructure.auth.password_service import PasswordHasher
from tranquilo_auth.infrastructure.mail import LoggingMailDispatcher, SmtpMailDispatcher
from tranquilo_auth.infrastructure.persistence import SqlAlchemyUserDirectory, create_schema

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_database_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections are shared across threads."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # In-memory databases live inside a single connection
        kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


class AuthContainer:
    """
    Dependency Injection Container for the credential service.

    Infrastructure components are created once and shared; use cases are
    built on each lookup from the shared components.
    """

    def __init__(self, config: ApplicationConfig) -> None:
        """Initialize the container with configuration."""
        self.config = config
        self._singletons: dict[type[Any], Any] = {}
        self._factories: dict[type[Any], Callable[[], Any]] = {}
        self._shared: set[type[Any]] = set()

        self._register_infrastructure()
        self._register_application_services()
        self._register_use_cases()

        logger.info("Dependency injection container initialized")

    @classmethod
    def from_config(cls, config: ApplicationConfig, create_tables: bool = True) -> "AuthContainer":
        """Build a container and optionally create the directory schema."""
        container = cls(config)
        if create_tables:
            create_schema(container.engine)
        return container

    @property
    def engine(self) -> Engine:
        return self.get(Engine)

    def _register_infrastructure(self) -> None:
        """Register infrastructure components."""
        database = self.config.database
        security = self.config.security

        self._register_singleton(Engine, lambda: create_database_engine(database.url, database.echo))
        self._register_singleton(
            sessionmaker,
            lambda: sessionmaker(bind=self.get(Engine), class_=Session, expire_on_commit=False),
        )
        self._register_singleton(
            IUserDirectory,  # type: ignore[type-abstract]
            lambda: SqlAlchemyUserDirectory(self.get(sessionmaker)),
        )
        self._register_singleton(
            ICredentialHasher,  # type: ignore[type-abstract]
            lambda: PasswordHasher(rounds=security.bcrypt_rounds),
        )
        self._register_singleton(
            SessionTokenService,
            lambda: SessionTokenService(
                secret=security.token_secret,
                key_id=security.token_key_id,
                token_ttl_minutes=security.session_token_ttl_minutes,
            ),
        )
        self._register_singleton(
            ISessionTokenIssuer,  # type: ignore[type-abstract]
            lambda: self.get(SessionTokenService),
        )
        self._register_singleton(
            IMailDispatcher,  # type: ignore[type-abstract]
            self._create_mail_dispatcher,
        )

    def _create_mail_dispatcher(self) -> IMailDispatcher:
        mail = self.config.mail
        if not mail.smtp_host:
            logger.warning("SMTP_HOST not set - password recovery emails will only be logged")
            return LoggingMailDispatcher()
        return SmtpMailDispatcher(
            host=mail.smtp_host,
            port=mail.smtp_port,
            username=mail.smtp_user,
            password=mail.smtp_password,
            from_address=mail.from_address,
            starttls=mail.starttls,
            timeout=mail.timeout,
        )

    def _register_application_services(self) -> None:
        """Register application-level services."""
        security = self.config.security
        self._register_singleton(
            ResetTokenManager,
            lambda: ResetTokenManager(
                directory=self.get(IUserDirectory),  # type: ignore[type-abstract]
                hasher=self.get(ICredentialHasher),  # type: ignore[type-abstract]
                token_ttl_minutes=security.reset_token_ttl_minutes,
                token_bytes=security.reset_token_bytes,
            ),
        )

    def _register_use_cases(self) -> None:
        """Register all use cases."""
        # Registration and authentication
        self._register_factory(
            RegisterUserUseCase,
            lambda: RegisterUserUseCase(
                directory=self.get(IUserDirectory),  # type: ignore[type-abstract]
                hasher=self.get(ICredentialHasher),  # type: ignore[type-abstract]
            ),
        )
        self._register_factory(
            LoginUseCase,
            lambda: LoginUseCase(
                directory=self.get(IUserDirectory),  # type: ignore[type-abstract]
                hasher=self.get(ICredentialHasher),  # type: ignore[type-abstract]
                token_issuer=self.get(ISessionTokenIssuer),  # type: ignore[type-abstract]
            ),
        )

        # Password reset
        self._register_factory(
            RequestPasswordResetUseCase,
            lambda: RequestPasswordResetUseCase(
                reset_tokens=self.get(ResetTokenManager),
                mailer=self.get(IMailDispatcher),  # type: ignore[type-abstract]
            ),
        )
        self._register_factory(
            ResetPasswordUseCase,
            lambda: ResetPasswordUseCase(reset_tokens=self.get(ResetTokenManager)),
        )

        # User lookups
        self._register_factory(
            GetUserUseCase,
            lambda: GetUserUseCase(directory=self.get(IUserDirectory)),  # type: ignore[type-abstract]
        )
        self._register_factory(
            CheckUserExistsUseCase,
            lambda: CheckUserExistsUseCase(directory=self.get(IUserDirectory)),  # type: ignore[type-abstract]
        )

    def _register_singleton(self, cls: type[T], factory: Callable[[], Any]) -> None:
        """Register a singleton component."""
        self._factories[cls] = factory
        self._shared.add(cls)

    def _register_factory(self, cls: type[T], factory: Callable[[], Any]) -> None:
        """Register a factory for creating instances."""
        self._factories[cls] = factory

    def get(self, cls: type[T]) -> T:
        """
        Get an instance of a registered component.

        Args:
            cls: The class type to retrieve

        Returns:
            Instance of the requested class

        Raises:
            KeyError: If the class is not registered
        """
        if cls in self._singletons:
            return cast(T, self._singletons[cls])

        if cls not in self._factories:
            raise KeyError(f"No registration found for {cls.__name__}")

        instance = self._factories[cls]()
        if cls in self._shared:
            self._singletons[cls] = instance

        return cast(T, instance)

    def has(self, cls: type[T]) -> bool:
        """Check if a component is registered."""
        return cls in self._factories

    def register(self, cls: type[T], instance: T) -> None:
        """
        Register a pre-created instance.

        Use cases built afterwards receive the replacement.

        Args:
            cls: The class type
            instance: The instance to register
        """
        self._singletons[cls] = instance
        self._factories[cls] = lambda: instance
        self._shared.add(cls)

    def cleanup(self) -> None:
        """Dispose of the connection pool and forget created components."""
        if Engine in self._singletons:
            self._singletons[Engine].dispose()
        self._singletons.clear()
        logger.info("Container cleaned up successfully")
