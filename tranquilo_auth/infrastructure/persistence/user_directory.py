"""
SQLAlchemy User Directory Implementation

Implements IUserDirectory on a relational database. Each operation runs in
its own short session; updates are single statements so a reader never
observes a password change without the matching reset-field clear.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from tranquilo_auth.application.interfaces.exceptions import (
    DuplicateUserError,
    StoreUnavailableError,
)
from tranquilo_auth.domain.entities import User

from .models import UserModel

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes returned by backends without timezone support."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class SqlAlchemyUserDirectory:
    """
    Relational implementation of the user directory.

    Translates between UserModel rows and User entities and maps driver
    errors to repository exceptions.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """
        Initialize the directory.

        Args:
            session_factory: Factory producing database sessions
        """
        self.session_factory = session_factory

    async def find_by_email(self, email: str) -> User | None:
        """Retrieve a user by email."""
        try:
            with self.session_factory() as session:
                row = session.execute(
                    select(UserModel).where(UserModel.email == email)
                ).scalar_one_or_none()
                return self._to_entity(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user by email: {e}")
            raise StoreUnavailableError("find_by_email", e) from e

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Retrieve a user by id."""
        try:
            with self.session_factory() as session:
                row = session.get(UserModel, user_id)
                return self._to_entity(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user {user_id}: {e}")
            raise StoreUnavailableError("find_by_id", e) from e

    async def find_by_identifier_or_email(self, identifier: str, email: str) -> User | None:
        """Retrieve the first user whose cpf or email matches."""
        try:
            with self.session_factory() as session:
                row = (
                    session.execute(
                        select(UserModel)
                        .where(or_(UserModel.cpf == identifier, UserModel.email == email))
                        .limit(1)
                    )
                    .scalars()
                    .first()
                )
                return self._to_entity(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user by identifier or email: {e}")
            raise StoreUnavailableError("find_by_identifier_or_email", e) from e

    async def insert(self, user: User) -> UUID:
        """Persist a new user; unique constraint violations become DuplicateUserError."""
        model = self._to_model(user)
        try:
            with self.session_factory() as session, session.begin():
                session.add(model)
        except IntegrityError as e:
            logger.info(f"Rejected duplicate user {user.id}")
            raise DuplicateUserError(user.email, e) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert user {user.id}: {e}")
            raise StoreUnavailableError("insert", e) from e

        logger.debug(f"Inserted user {user.id}")
        return user.id

    async def update_reset_fields(self, user_id: UUID, token: str, expires_at: datetime) -> bool:
        """Set the pending reset pair, overwriting any previous one."""
        statement = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_reset_token=token, password_reset_expires=expires_at)
        )
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(statement)
                return bool(result.rowcount == 1)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store reset token for user {user_id}: {e}")
            raise StoreUnavailableError("update_reset_fields", e) from e

    async def update_password_and_clear_reset(
        self, user_id: UUID, password_hash: str, expected_token: str | None = None
    ) -> bool:
        """Set the password hash and clear both reset fields in one statement."""
        statement = update(UserModel).where(UserModel.id == user_id)
        if expected_token is not None:
            statement = statement.where(UserModel.password_reset_token == expected_token)
        statement = statement.values(
            password_hash=password_hash,
            password_reset_token=None,
            password_reset_expires=None,
        )
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(statement)
                return bool(result.rowcount == 1)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update password for user {user_id}: {e}")
            raise StoreUnavailableError("update_password_and_clear_reset", e) from e

    def _to_entity(self, row: UserModel) -> User:
        return User(
            id=row.id,
            cpf=row.cpf,
            email=row.email,
            name=row.name,
            state=row.state,
            city=row.city,
            street=row.street,
            district=row.district,
            number=row.number,
            phone=row.phone,
            password_hash=row.password_hash,
            reset_token=row.password_reset_token,
            reset_expires_at=_as_utc(row.password_reset_expires),
            created_at=_as_utc(row.created_at) or datetime.now(UTC),
        )

    def _to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            cpf=user.cpf,
            email=user.email,
            name=user.name,
            state=user.state,
            city=user.city,
            street=user.street,
            district=user.district,
            number=user.number,
            phone=user.phone,
            password_hash=user.password_hash,
            password_reset_token=user.reset_token,
            password_reset_expires=user.reset_expires_at,
            created_at=user.created_at,
        )
