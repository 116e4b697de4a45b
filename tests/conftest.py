"""Global pytest configuration and fixtures."""

# Standard library imports
from collections.abc import Generator
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

# Third-party imports
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Local imports
from tranquilo_auth.application.interfaces.exceptions import DuplicateUserError
from tranquilo_auth.application.services import ResetTokenManager
from tranquilo_auth.config import (
    ApplicationConfig,
    DatabaseConfig,
    Environment,
    SecurityConfig,
    reset_config,
)
from tranquilo_auth.domain.entities import User
from tranquilo_auth.infrastructure.auth.jwt_service import SessionTokenService
from tranquilo_auth.infrastructure.auth.password_service import PasswordHasher
from tranquilo_auth.infrastructure.persistence import SqlAlchemyUserDirectory, create_schema

TEST_SECRET = "test-session-secret-0123456789abcdef"
TEST_BCRYPT_ROUNDS = 4


class InMemoryUserDirectory:
    """Dictionary-backed user directory with the same contract as the SQL one."""

    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}

    async def find_by_email(self, email: str) -> User | None:
        return next((replace(u) for u in self.users.values() if u.email == email), None)

    async def find_by_id(self, user_id: UUID) -> User | None:
        user = self.users.get(user_id)
        return replace(user) if user else None

    async def find_by_identifier_or_email(self, identifier: str, email: str) -> User | None:
        return next(
            (replace(u) for u in self.users.values() if u.cpf == identifier or u.email == email),
            None,
        )

    async def insert(self, user: User) -> UUID:
        if any(u.cpf == user.cpf or u.email == user.email for u in self.users.values()):
            raise DuplicateUserError(user.email)
        self.users[user.id] = replace(user)
        return user.id

    async def update_reset_fields(self, user_id: UUID, token: str, expires_at: datetime) -> bool:
        user = self.users.get(user_id)
        if user is None:
            return False
        self.users[user_id] = replace(user, reset_token=token, reset_expires_at=expires_at)
        return True

    async def update_password_and_clear_reset(
        self, user_id: UUID, password_hash: str, expected_token: str | None = None
    ) -> bool:
        user = self.users.get(user_id)
        if user is None:
            return False
        if expected_token is not None and user.reset_token != expected_token:
            return False
        self.users[user_id] = replace(
            user, password_hash=password_hash, reset_token=None, reset_expires_at=None
        )
        return True


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _reset_config_singleton() -> Generator[None, None, None]:
    """Keep the configuration singleton from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def hasher() -> PasswordHasher:
    """bcrypt hasher with a low cost factor for fast tests."""
    return PasswordHasher(rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def token_service() -> SessionTokenService:
    return SessionTokenService(secret=TEST_SECRET)


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def reset_tokens(
    directory: InMemoryUserDirectory, hasher: PasswordHasher, clock: FakeClock
) -> ResetTokenManager:
    return ResetTokenManager(directory=directory, hasher=hasher, clock=clock)


@pytest.fixture
def registration_fields() -> dict[str, Any]:
    """A complete, valid registration form."""
    return {
        "name": "Maria Silva",
        "cpf": "123.456.789-09",
        "state": "SP",
        "city": "Campinas",
        "street": "Rua das Flores",
        "district": "Centro",
        "number": "42",
        "email": "maria@example.com",
        "phone": "+55 19 99999-0000",
        "password": "Abcdef1!",
        "confirmpassword": "Abcdef1!",
    }


@pytest_asyncio.fixture
async def stored_user(
    directory: InMemoryUserDirectory, hasher: PasswordHasher, registration_fields: dict[str, Any]
) -> User:
    """A user already present in the in-memory directory."""
    user = User.create(registration_fields, hasher.hash(registration_fields["password"]))
    await directory.insert(user)
    return user


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


@pytest.fixture
def sql_directory(session_factory: sessionmaker[Session]) -> SqlAlchemyUserDirectory:
    return SqlAlchemyUserDirectory(session_factory)


@pytest.fixture
def test_config() -> ApplicationConfig:
    """Configuration for an application backed by in-memory SQLite."""
    return ApplicationConfig(
        environment=Environment.TESTING,
        database=DatabaseConfig(url="sqlite://"),
        security=SecurityConfig(token_secret=TEST_SECRET, bcrypt_rounds=TEST_BCRYPT_ROUNDS),
    )
