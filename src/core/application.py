"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with all necessary middleware, exception handlers, and routers registered.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.adapters.api.v1 import api_router
from src.core.config.settings import settings
from src.core.handlers import register_exception_handlers
from src.core.lifecycle import create_lifespan_manager
from src.core.middleware import configure_middleware
from src.core.ratelimiter import limiter
from src.utils.i18n import get_translated_message


def create_application() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI application with all necessary
    configuration, middleware, exception handlers, and routers. Interactive
    API docs are served only in debug mode.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Three-step password recovery backed by a hosted auth provider.",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
        default_response_description=get_translated_message(
            "successful_response", settings.DEFAULT_LANGUAGE
        ),
    )

    # Shared by the route decorators and SlowAPIMiddleware
    app.state.limiter = limiter

    # Configure middleware
    configure_middleware(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api/v1")

    return app
