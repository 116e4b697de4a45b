"""
Credential infrastructure: bcrypt hashing, JWT session tokens, FastAPI
bearer authentication and the authentication HTTP endpoints.
"""

from .jwt_service import SessionTokenService, extract_bearer_token
from .middleware import CorrelationIdMiddleware, SessionBearer
from .password_service import PasswordHasher

__all__ = [
    "PasswordHasher",
    "SessionTokenService",
    "extract_bearer_token",
    "SessionBearer",
    "CorrelationIdMiddleware",
]
