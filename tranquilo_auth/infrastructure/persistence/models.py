"""
Database models for the user directory.

Email and national identifier carry unique constraints so duplicate
registrations are rejected by the database even under concurrency.
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, String, Uuid
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class UserModel(Base):  # type: ignore[valid-type, misc]
    """User table with credential and password reset fields."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    cpf = Column(String(32), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile information
    name = Column(String(255), nullable=False)
    state = Column(String(64), nullable=False)
    city = Column(String(128), nullable=False)
    street = Column(String(255), nullable=False)
    district = Column(String(128), nullable=False)
    number = Column(String(32), nullable=False)
    phone = Column(String(32), nullable=False)

    # Password reset
    password_reset_token = Column(String(255), nullable=True)
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(password_reset_token IS NULL) = (password_reset_expires IS NULL)",
            name="ck_users_reset_pair",
        ),
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"


def create_schema(engine: Engine) -> None:
    """Create the directory tables if they do not exist."""
    Base.metadata.create_all(bind=engine)
