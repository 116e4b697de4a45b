"""
User Lookup Use Cases

Read-only queries over the directory: a user's public profile and whether a
national identifier or email is already registered.
"""

from dataclasses import dataclass
from uuid import UUID

from tranquilo_auth.application.interfaces.directory import IUserDirectory
from tranquilo_auth.domain.exceptions import UserNotFoundError, ValidationError

from .base import UseCase, UseCaseRequest, UseCaseResponse


@dataclass
class GetUserRequest(UseCaseRequest):
    """Request for a user's public profile."""

    user_id: str | None = None


@dataclass
class GetUserResponse(UseCaseResponse):
    """Response carrying the public profile in ``data``."""


@dataclass
class CheckUserExistsRequest(UseCaseRequest):
    """Request to check whether an identifier is taken."""

    identifier: str | None = None


@dataclass
class CheckUserExistsResponse(UseCaseResponse):
    """Response from an existence check."""

    exists: bool = False


class GetUserUseCase(UseCase[GetUserRequest, GetUserResponse]):
    """Returns a user's profile without credential or reset fields."""

    response_class = GetUserResponse

    def __init__(self, directory: IUserDirectory) -> None:
        super().__init__("GetUserUseCase")
        self.directory = directory

    async def validate(self, request: GetUserRequest) -> ValidationError | None:
        if not request.user_id:
            return ValidationError("User id is required", field="user_id")
        return None

    async def process(self, request: GetUserRequest) -> GetUserResponse:
        try:
            user_id = UUID(str(request.user_id))
        except ValueError:
            # Ids that are not UUIDs can never match a record
            raise UserNotFoundError()

        user = await self.directory.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        return GetUserResponse(
            success=True, data=user.public_profile(), request_id=request.request_id
        )


class CheckUserExistsUseCase(UseCase[CheckUserExistsRequest, CheckUserExistsResponse]):
    """Reports whether a national identifier or email is already registered."""

    response_class = CheckUserExistsResponse

    def __init__(self, directory: IUserDirectory) -> None:
        super().__init__("CheckUserExistsUseCase")
        self.directory = directory

    async def validate(self, request: CheckUserExistsRequest) -> ValidationError | None:
        if not request.identifier:
            return ValidationError("Identifier is required", field="identifier")
        return None

    async def process(self, request: CheckUserExistsRequest) -> CheckUserExistsResponse:
        identifier = str(request.identifier)
        user = await self.directory.find_by_identifier_or_email(identifier, identifier)
        exists = user is not None
        return CheckUserExistsResponse(
            success=True,
            data={"isUserAlreadyExists": exists},
            request_id=request.request_id,
            exists=exists,
        )
