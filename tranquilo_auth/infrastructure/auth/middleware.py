"""
Authentication middleware and dependencies for FastAPI.

Resolves the bearer session token on protected routes and binds a
correlation id to every request.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import HTTPException, Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from tranquilo_auth.domain.exceptions import InvalidSessionTokenError, MissingCredentialError
from tranquilo_auth.infrastructure.monitoring.logging import correlation_context

from .jwt_service import SessionTokenService, extract_bearer_token

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class SessionBearer:
    """
    Session token authentication.

    Validates the bearer token in the Authorization header and returns the
    user id it was issued for. A request without a token is denied with 401;
    a token that fails verification is rejected with 400.
    """

    def __init__(self, token_service_provider: Callable[[Request], SessionTokenService]):
        """
        Initialize session bearer authentication.

        Args:
            token_service_provider: Resolves the token service for a request
        """
        self.token_service_provider = token_service_provider

    async def __call__(self, request: Request) -> str:
        """
        Validate the session token from the Authorization header.

        Args:
            request: FastAPI request object

        Returns:
            The authenticated user id

        Raises:
            HTTPException: If the token is missing or invalid
        """
        token = extract_bearer_token(request.headers.get("Authorization"))
        token_service = self.token_service_provider(request)

        try:
            user_id = token_service.verify(token)
        except MissingCredentialError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
        except InvalidSessionTokenError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        request.state.user_id = user_id
        return user_id


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Request ID middleware.

    Reuses the caller's X-Request-ID or generates one, binds it to the
    logging correlation context and echoes it on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        """Add request ID to request, log context and response."""
        request_id = request.headers.get(REQUEST_ID_HEADER)

        with correlation_context(request_id) as correlation_id:
            request.state.request_id = correlation_id
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response  # type: ignore[no-any-return]
