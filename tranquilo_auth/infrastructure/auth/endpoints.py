"""
Authentication API endpoints for the credential service.

This module provides FastAPI endpoints for registration, login, password
recovery and user lookups. Handlers translate request bodies into use case
requests and map the ErrorKind of a failed response to an HTTP status.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, field_validator

from tranquilo_auth.application.use_cases import (
    CheckUserExistsRequest,
    CheckUserExistsUseCase,
    GetUserRequest,
    GetUserUseCase,
    LoginRequest,
    LoginUseCase,
    RegisterUserRequest,
    RegisterUserUseCase,
    RequestPasswordResetRequest,
    RequestPasswordResetUseCase,
    ResetPasswordRequest,
    ResetPasswordUseCase,
    UseCaseResponse,
)
from tranquilo_auth.domain.exceptions import ErrorKind
from tranquilo_auth.infrastructure.container import AuthContainer
from tranquilo_auth.infrastructure.monitoring.logging import user_context

from .jwt_service import SessionTokenService
from .middleware import SessionBearer

logger = logging.getLogger(__name__)

# Create routers
router = APIRouter(prefix="/auth", tags=["Authentication"])
users_router = APIRouter(prefix="/user", tags=["Users"])

# Status codes for registration, login and user lookups
ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.CONFLICT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.TOKEN_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.TOKEN_EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DELIVERY_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.MISSING_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_TOKEN: status.HTTP_400_BAD_REQUEST,
}


# Request models
class LoginPayload(BaseModel):
    """Login request. The password is passed through untouched."""

    email: str | None = None
    password: str | None = None

    @field_validator("email")
    @classmethod
    def strip_email(cls, value: str | None) -> str | None:
        return value.strip() if value else value


class ForgotPasswordPayload(BaseModel):
    """Password recovery request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str | None = None


class ResetPasswordPayload(BaseModel):
    """Password reset confirmation. The new password is passed through untouched."""

    email: str | None = None
    token: str | None = None
    password: str | None = None

    @field_validator("email", "token")
    @classmethod
    def strip_identifiers(cls, value: str | None) -> str | None:
        return value.strip() if value else value


# Dependency injection functions


def get_container(request: Request) -> AuthContainer:
    """Get the container attached to the application."""
    return request.app.state.container  # type: ignore[no-any-return]


def get_token_service(request: Request) -> SessionTokenService:
    """Get the session token service instance."""
    return get_container(request).get(SessionTokenService)


require_session = SessionBearer(get_token_service)


def _correlation_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _error_body(response: UseCaseResponse, key: str) -> dict[str, Any]:
    body: dict[str, Any] = {key: response.error}
    if response.details.get("errors"):
        body["errors"] = response.details["errors"]
    return body


def core_error(response: UseCaseResponse) -> JSONResponse:
    """Build the error response for registration, login and user lookups."""
    kind = response.error_kind or ErrorKind.STORE_UNAVAILABLE
    return JSONResponse(status_code=ERROR_STATUS[kind], content=_error_body(response, "msg"))


def reset_flow_error(response: UseCaseResponse) -> JSONResponse:
    """Every password recovery failure is reported as 400 with an ``error`` key."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(response, "error")
    )


# Public endpoints (no authentication required)
@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    payload: dict[str, Any] = Body(default={}),
    container: AuthContainer = Depends(get_container),
) -> Any:
    """
    Register a new user account.

    Requires name, cpf, state, city, street, district, number, email, phone,
    password and confirmpassword. The password must satisfy the password
    policy and match its confirmation.
    """
    use_case = container.get(RegisterUserUseCase)
    response = await use_case.execute(
        RegisterUserRequest(fields=payload, correlation_id=_correlation_id(request))
    )
    if not response.success:
        return core_error(response)
    return response.data


@router.post("/login")
async def login(
    request: Request,
    payload: LoginPayload,
    container: AuthContainer = Depends(get_container),
) -> Any:
    """
    Authenticate a user and issue a session token.

    Unknown emails are reported as 404 and wrong passwords as 422.
    """
    use_case = container.get(LoginUseCase)
    response = await use_case.execute(
        LoginRequest(
            email=payload.email,
            password=payload.password,
            correlation_id=_correlation_id(request),
        )
    )
    if not response.success:
        return core_error(response)
    return {**response.data, "token": response.token}


@router.post("/forgot_password")
async def forgot_password(
    request: Request,
    payload: ForgotPasswordPayload,
    container: AuthContainer = Depends(get_container),
) -> Any:
    """Start a password reset and email the reset token."""
    use_case = container.get(RequestPasswordResetUseCase)
    response = await use_case.execute(
        RequestPasswordResetRequest(email=payload.email, correlation_id=_correlation_id(request))
    )
    if not response.success:
        return reset_flow_error(response)
    return response.data


@router.post("/reset_password")
async def reset_password(
    request: Request,
    payload: ResetPasswordPayload,
    container: AuthContainer = Depends(get_container),
) -> Any:
    """Set a new password using the emailed reset token."""
    use_case = container.get(ResetPasswordUseCase)
    response = await use_case.execute(
        ResetPasswordRequest(
            email=payload.email,
            token=payload.token,
            password=payload.password,
            correlation_id=_correlation_id(request),
        )
    )
    if not response.success:
        return reset_flow_error(response)
    return response.data


@users_router.get("/exists/{identifier}")
async def user_exists(
    identifier: str,
    request: Request,
    container: AuthContainer = Depends(get_container),
) -> Any:
    """Check whether a cpf or email is already registered."""
    use_case = container.get(CheckUserExistsUseCase)
    response = await use_case.execute(
        CheckUserExistsRequest(identifier=identifier, correlation_id=_correlation_id(request))
    )
    if not response.success:
        return core_error(response)
    return response.data


# Protected endpoints
@users_router.get("/{user_id}")
async def get_user(
    user_id: str,
    request: Request,
    current_user: str = Depends(require_session),
    container: AuthContainer = Depends(get_container),
) -> Any:
    """Return a user's public profile. Requires a session token."""
    with user_context(current_user):
        use_case = container.get(GetUserUseCase)
        response = await use_case.execute(
            GetUserRequest(user_id=user_id, correlation_id=_correlation_id(request))
        )
    if not response.success:
        return core_error(response)
    return {"user": response.data}
