"""
Password Reset Use Cases

Requesting a reset persists a fresh token and mails it to the user.
Resetting consumes the token and stores the new password hash.
"""

from dataclasses import dataclass

from tranquilo_auth.application.interfaces.mail import IMailDispatcher
from tranquilo_auth.application.services.reset_token_manager import ResetTokenManager
from tranquilo_auth.domain.exceptions import DeliveryFailedError, ValidationError
from tranquilo_auth.domain.services import PasswordPolicy

from .base import UseCase, UseCaseRequest, UseCaseResponse, require_fields

FORGOT_PASSWORD_TEMPLATE = "auth/forgot_password"


@dataclass
class RequestPasswordResetRequest(UseCaseRequest):
    """Request to start a password reset."""

    email: str | None = None


@dataclass
class RequestPasswordResetResponse(UseCaseResponse):
    """Response from starting a password reset."""


@dataclass
class ResetPasswordRequest(UseCaseRequest):
    """Request to set a new password with a reset token."""

    email: str | None = None
    token: str | None = None
    password: str | None = None


@dataclass
class ResetPasswordResponse(UseCaseResponse):
    """Response from a password reset."""


class RequestPasswordResetUseCase(
    UseCase[RequestPasswordResetRequest, RequestPasswordResetResponse]
):
    """
    Starts a reset and hands the token to the mail dispatcher.

    If delivery fails the persisted token stays valid; the caller only
    learns that the email could not be sent.
    """

    response_class = RequestPasswordResetResponse

    def __init__(self, reset_tokens: ResetTokenManager, mailer: IMailDispatcher) -> None:
        super().__init__("RequestPasswordResetUseCase")
        self.reset_tokens = reset_tokens
        self.mailer = mailer

    async def validate(self, request: RequestPasswordResetRequest) -> ValidationError | None:
        if not request.email:
            return ValidationError("Email is required", field="email")
        return None

    async def process(self, request: RequestPasswordResetRequest) -> RequestPasswordResetResponse:
        email = str(request.email)
        token, expires_at = await self.reset_tokens.begin_reset(email)

        try:
            await self.mailer.send(
                to=email,
                template_id=FORGOT_PASSWORD_TEMPLATE,
                context={"token": token, "expires_at": expires_at},
            )
        except DeliveryFailedError:
            raise
        except Exception as e:
            raise DeliveryFailedError(reason=type(e).__name__) from e

        return RequestPasswordResetResponse(
            success=True,
            data={"status": "Email sent successfully"},
            request_id=request.request_id,
        )


class ResetPasswordUseCase(UseCase[ResetPasswordRequest, ResetPasswordResponse]):
    """Consumes a reset token and sets the new password."""

    response_class = ResetPasswordResponse

    def __init__(
        self,
        reset_tokens: ResetTokenManager,
        policy: type[PasswordPolicy] = PasswordPolicy,
    ) -> None:
        super().__init__("ResetPasswordUseCase")
        self.reset_tokens = reset_tokens
        self.policy = policy

    async def validate(self, request: ResetPasswordRequest) -> ValidationError | None:
        errors = require_fields(
            {"email": request.email, "token": request.token, "password": request.password},
            ["email", "token", "password"],
        )
        if errors:
            return ValidationError("Required fields are missing", errors=errors)

        is_valid, policy_errors = self.policy.validate(str(request.password))
        if not is_valid:
            return ValidationError(
                "The new password does not meet the password policy",
                errors=policy_errors,
                field="password",
            )
        return None

    async def process(self, request: ResetPasswordRequest) -> ResetPasswordResponse:
        await self.reset_tokens.complete_reset(
            str(request.email), str(request.token), str(request.password)
        )
        return ResetPasswordResponse(
            success=True,
            data={"status": "Password changed successfully"},
            request_id=request.request_id,
        )
