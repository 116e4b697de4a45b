"""
Base Use Case

Provides the foundation for all use cases in the application layer.
Implements common patterns like logging, validation, and error handling.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from uuid import UUID, uuid4

from tranquilo_auth.application.interfaces.exceptions import RepositoryError
from tranquilo_auth.domain.exceptions import CredentialException, ErrorKind, ValidationError

logger = logging.getLogger(__name__)

# Type variables for request and response
TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")
T = TypeVar("T")

UNEXPECTED_ERROR_MESSAGE = "Unexpected error, please try again later"


@dataclass(kw_only=True)
class UseCaseRequest:
    """Base class for use case requests."""

    request_id: UUID = field(default_factory=uuid4)
    correlation_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class UseCaseResponse:
    """Base class for use case responses."""

    success: bool
    data: Any | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    details: dict[str, Any] = field(default_factory=dict)
    request_id: UUID | None = None

    @classmethod
    def success_response(cls, data: Any, request_id: UUID, **fields: Any) -> "UseCaseResponse":
        """Create a successful response."""
        return cls(success=True, data=data, request_id=request_id, **fields)

    @classmethod
    def error_response(
        cls,
        error: str,
        request_id: UUID,
        error_kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> "UseCaseResponse":
        """Create an error response."""
        return cls(
            success=False,
            error=error,
            error_kind=error_kind,
            details=details or {},
            request_id=request_id,
        )


class UseCase(ABC, Generic[TRequest, TResponse]):
    """
    Abstract base class for all use cases.

    Provides a consistent interface and common functionality for
    credential workflow orchestration. Credential errors raised while
    processing become error responses carrying their ErrorKind; anything
    else is logged and reported as a generic store failure.
    """

    response_class: type[UseCaseResponse] = UseCaseResponse

    def __init__(self, name: str | None = None) -> None:
        """
        Initialize use case.

        Args:
            name: Optional name for the use case (defaults to class name)
        """
        self.name = name or self.__class__.__name__
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    async def execute(self, request: TRequest) -> TResponse:
        """
        Execute the use case.

        This method provides the template for use case execution with
        logging, validation, and error handling.

        Args:
            request: The use case request

        Returns:
            The use case response
        """
        request_id = getattr(request, "request_id", None) or uuid4()

        self.logger.info(
            f"Executing {self.name}",
            extra={"request_id": str(request_id), "use_case": self.name},
        )

        try:
            validation_error = await self.validate(request)
            if validation_error:
                self.logger.warning(
                    f"Validation failed for {self.name}: {validation_error}",
                    extra={"request_id": str(request_id)},
                )
                return self._create_error_response(validation_error, request_id)

            response = await self.process(request)

            self.logger.info(
                f"Successfully executed {self.name}",
                extra={"request_id": str(request_id)},
            )
            return response

        except CredentialException as e:
            self.logger.warning(
                f"{self.name} rejected: {e.kind.value}",
                extra={"request_id": str(request_id), "error_kind": e.kind.value},
            )
            return self._create_error_response(e, request_id)

        except RepositoryError as e:
            self.logger.error(
                f"Directory store failure in {self.name}: {e}",
                extra={"request_id": str(request_id)},
                exc_info=True,
            )
            return self._create_unexpected_response(request_id)

        except Exception as e:
            self.logger.error(
                f"Error executing {self.name}: {e}",
                extra={"request_id": str(request_id)},
                exc_info=True,
            )
            return self._create_unexpected_response(request_id)

    @abstractmethod
    async def validate(self, request: TRequest) -> ValidationError | None:
        """
        Validate the request.

        Args:
            request: The request to validate

        Returns:
            The validation error if validation fails, None otherwise
        """
        pass

    @abstractmethod
    async def process(self, request: TRequest) -> TResponse:
        """
        Process the request and execute business logic.

        Args:
            request: The validated request

        Returns:
            The response
        """
        pass

    async def run_blocking(self, func: Callable[..., T], *args: Any) -> T:
        """Run a CPU-bound call (bcrypt) in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    def _create_error_response(self, error: CredentialException, request_id: UUID) -> TResponse:
        return self.response_class.error_response(  # type: ignore[return-value]
            error.message, request_id, error.kind, error.details
        )

    def _create_unexpected_response(self, request_id: UUID) -> TResponse:
        return self.response_class.error_response(  # type: ignore[return-value]
            UNEXPECTED_ERROR_MESSAGE, request_id, ErrorKind.STORE_UNAVAILABLE
        )


def require_fields(values: dict[str, Any], names: list[str]) -> list[str]:
    """Return one error message per field in ``names`` that is absent or empty."""
    return [f"The field {name} is required" for name in names if not values.get(name)]
