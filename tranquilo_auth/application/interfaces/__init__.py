"""
Application Interfaces

Contracts the infrastructure layer must implement.
"""

from .directory import IUserDirectory
from .exceptions import DuplicateUserError, RepositoryError, StoreUnavailableError
from .mail import IMailDispatcher
from .security import ICredentialHasher, ISessionTokenIssuer

__all__ = [
    "IUserDirectory",
    "IMailDispatcher",
    "ICredentialHasher",
    "ISessionTokenIssuer",
    "RepositoryError",
    "StoreUnavailableError",
    "DuplicateUserError",
]
