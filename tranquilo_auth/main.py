"""
FastAPI application for the credential service.

``create_app`` wires configuration, the dependency container, middleware and
routers. Running this module starts the server with uvicorn.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tranquilo_auth import __version__
from tranquilo_auth.config import ApplicationConfig, get_config
from tranquilo_auth.infrastructure.auth.endpoints import router, users_router
from tranquilo_auth.infrastructure.auth.middleware import REQUEST_ID_HEADER, CorrelationIdMiddleware
from tranquilo_auth.infrastructure.container import AuthContainer
from tranquilo_auth.infrastructure.monitoring import setup_structured_logging

logger = logging.getLogger(__name__)


def create_app(
    config: ApplicationConfig | None = None, container: AuthContainer | None = None
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Application configuration (loaded from the environment if omitted)
        container: Pre-built container; when omitted one is built from config
            and disposed of on shutdown

    Returns:
        The configured application

    Raises:
        ValueError: If the configuration is invalid
    """
    config = config or (container.config if container else get_config())
    # Fail at startup rather than on the first request that needs a secret
    config.validate()
    owns_container = container is None
    if container is None:
        container = AuthContainer.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        setup_structured_logging(
            level=config.logging.level,
            format_type=config.logging.format_type,
            log_file=config.logging.file,
        )
        logger.info(
            "Starting credential service",
            extra={"environment": config.environment.value},
        )

        yield

        logger.info("Shutting down credential service")
        if owns_container:
            app.state.container.cleanup()

    app = FastAPI(
        title="TranquiloPay Authentication API",
        description="Registration, login and password recovery for TranquiloPay accounts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.config = config

    # Add middleware
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Service banner."""
        return {"msg": "API TranquiloPay"}

    app.include_router(router)
    app.include_router(users_router)

    return app


def main() -> None:
    """Run the API server."""
    import uvicorn

    config = get_config()
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
