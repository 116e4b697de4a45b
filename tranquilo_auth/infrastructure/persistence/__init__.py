"""Relational persistence for the user directory."""

from .models import Base, UserModel, create_schema
from .user_directory import SqlAlchemyUserDirectory

__all__ = ["Base", "UserModel", "SqlAlchemyUserDirectory", "create_schema"]
