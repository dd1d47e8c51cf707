"""Application lifecycle management.

This module handles application startup and shutdown events, ensuring proper
initialization and cleanup of application resources.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.dependency_injection.recovery_dependencies import (
    create_auth_http_client,
)


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Opens the shared HTTP client for the Supabase provider and closes it
        on shutdown.

        Args:
            app (FastAPI): The FastAPI application instance
        """
        # Startup
        if settings.AUTH_PROVIDER == "supabase":
            app.state.auth_http_client = create_auth_http_client()
        logger.info(
            "application_startup",
            env=settings.APP_ENV,
            version=settings.VERSION,
            auth_provider=settings.AUTH_PROVIDER,
        )

        yield

        # Shutdown
        client = getattr(app.state, "auth_http_client", None)
        if client is not None:
            await client.aclose()
            app.state.auth_http_client = None
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
