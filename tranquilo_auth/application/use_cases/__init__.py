"""
Application Use Cases Layer

Orchestrates the credential lifecycle: each use case validates its request,
awaits its collaborators in sequence and reports failures as error
responses tagged with an ErrorKind.
"""

# Authentication
from .authentication import LoginRequest, LoginResponse, LoginUseCase
from .base import UseCase, UseCaseRequest, UseCaseResponse

# Password reset
from .password_reset import (
    FORGOT_PASSWORD_TEMPLATE,
    RequestPasswordResetRequest,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    ResetPasswordRequest,
    ResetPasswordResponse,
    ResetPasswordUseCase,
)

# Registration
from .registration import (
    REQUIRED_FIELDS,
    RegisterUserRequest,
    RegisterUserResponse,
    RegisterUserUseCase,
)

# User lookups
from .users import (
    CheckUserExistsRequest,
    CheckUserExistsResponse,
    CheckUserExistsUseCase,
    GetUserRequest,
    GetUserResponse,
    GetUserUseCase,
)

__all__ = [
    # Base
    "UseCase",
    "UseCaseRequest",
    "UseCaseResponse",
    # Registration
    "REQUIRED_FIELDS",
    "RegisterUserRequest",
    "RegisterUserResponse",
    "RegisterUserUseCase",
    # Authentication
    "LoginRequest",
    "LoginResponse",
    "LoginUseCase",
    # Password reset
    "FORGOT_PASSWORD_TEMPLATE",
    "RequestPasswordResetRequest",
    "RequestPasswordResetResponse",
    "RequestPasswordResetUseCase",
    "ResetPasswordRequest",
    "ResetPasswordResponse",
    "ResetPasswordUseCase",
    # User lookups
    "GetUserRequest",
    "GetUserResponse",
    "GetUserUseCase",
    "CheckUserExistsRequest",
    "CheckUserExistsResponse",
    "CheckUserExistsUseCase",
]
