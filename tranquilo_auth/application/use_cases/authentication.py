"""
Authentication Use Cases

Implements login: email lookup, password verification and session token
issuance. No attempt counting or lockout is applied.
"""

from dataclasses import dataclass

from tranquilo_auth.application.interfaces.directory import IUserDirectory
from tranquilo_auth.application.interfaces.security import ICredentialHasher, ISessionTokenIssuer
from tranquilo_auth.domain.exceptions import (
    InvalidCredentialError,
    UserNotFoundError,
    ValidationError,
)

from .base import UseCase, UseCaseRequest, UseCaseResponse


@dataclass
class LoginRequest(UseCaseRequest):
    """Request to authenticate with email and password."""

    email: str | None = None
    password: str | None = None


@dataclass
class LoginResponse(UseCaseResponse):
    """Response from a login attempt."""

    token: str | None = None
    user_id: str | None = None


class LoginUseCase(UseCase[LoginRequest, LoginResponse]):
    """Authenticates a user and issues a session token."""

    response_class = LoginResponse

    def __init__(
        self,
        directory: IUserDirectory,
        hasher: ICredentialHasher,
        token_issuer: ISessionTokenIssuer,
    ) -> None:
        super().__init__("LoginUseCase")
        self.directory = directory
        self.hasher = hasher
        self.token_issuer = token_issuer

    async def validate(self, request: LoginRequest) -> ValidationError | None:
        if not request.email:
            return ValidationError("Email is required", field="email")
        if not request.password:
            return ValidationError("Password is required", field="password")
        return None

    async def process(self, request: LoginRequest) -> LoginResponse:
        user = await self.directory.find_by_email(str(request.email))
        if user is None:
            raise UserNotFoundError()

        if not await self.run_blocking(self.hasher.verify, request.password, user.password_hash):
            raise InvalidCredentialError()

        token = self.token_issuer.issue(user.id)

        self.logger.info("User authenticated", extra={"user_id": str(user.id)})
        return LoginResponse(
            success=True,
            data={"msg": "Authentication successful"},
            request_id=request.request_id,
            token=token,
            user_id=str(user.id),
        )
