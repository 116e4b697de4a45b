"""
Registration Use Cases

Implements account registration: required fields, uniqueness of national
identifier and email, password policy and confirmation, then record creation.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from tranquilo_auth.application.interfaces.directory import IUserDirectory
from tranquilo_auth.application.interfaces.exceptions import DuplicateUserError
from tranquilo_auth.application.interfaces.security import ICredentialHasher
from tranquilo_auth.domain.entities import User
from tranquilo_auth.domain.exceptions import ConflictError, ValidationError
from tranquilo_auth.domain.services import PasswordPolicy

from .base import UseCase, UseCaseRequest, UseCaseResponse, require_fields

REQUIRED_FIELDS = [
    "name",
    "cpf",
    "state",
    "city",
    "street",
    "district",
    "number",
    "email",
    "phone",
    "password",
    "confirmpassword",
]


@dataclass
class RegisterUserRequest(UseCaseRequest):
    """Request to register a new account from raw submitted fields."""

    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class RegisterUserResponse(UseCaseResponse):
    """Response from registering an account."""

    user_id: UUID | None = None


class RegisterUserUseCase(UseCase[RegisterUserRequest, RegisterUserResponse]):
    """
    Registers a new account.

    Nothing is written unless every check passes.
    """

    response_class = RegisterUserResponse

    def __init__(
        self,
        directory: IUserDirectory,
        hasher: ICredentialHasher,
        policy: type[PasswordPolicy] = PasswordPolicy,
    ) -> None:
        super().__init__("RegisterUserUseCase")
        self.directory = directory
        self.hasher = hasher
        self.policy = policy

    async def validate(self, request: RegisterUserRequest) -> ValidationError | None:
        """Report every missing required field."""
        errors = require_fields(request.fields, REQUIRED_FIELDS)
        if errors:
            return ValidationError("Required fields are missing", errors=errors)
        return None

    async def process(self, request: RegisterUserRequest) -> RegisterUserResponse:
        """Check uniqueness and password rules, then store the account."""
        fields = request.fields
        cpf = str(fields["cpf"])
        email = str(fields["email"])
        password = str(fields["password"])

        if await self.directory.find_by_identifier_or_email(cpf, email):
            raise ConflictError()

        is_valid, errors = self.policy.validate(password)
        if not is_valid:
            raise ValidationError(
                "The password must contain at least one uppercase letter, one lowercase "
                "letter, one number, one special character and at least "
                f"{self.policy.MIN_LENGTH} characters",
                errors=errors,
                field="password",
            )

        if password != str(fields["confirmpassword"]):
            raise ValidationError("The passwords do not match", field="confirmpassword")

        password_hash = await self.run_blocking(self.hasher.hash, password)
        user = User.create(fields, password_hash)

        try:
            user_id = await self.directory.insert(user)
        except DuplicateUserError:
            # Lost a race with a concurrent registration
            raise ConflictError()

        self.logger.info("User registered", extra={"user_id": str(user_id)})
        return RegisterUserResponse(
            success=True,
            data={"msg": "User created successfully"},
            request_id=request.request_id,
            user_id=user_id,
        )
