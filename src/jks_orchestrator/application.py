"""
FastAPI application factory.

Creates and configures the FastAPI application with middleware,
routers, and exception handlers.
"""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from jks_orchestrator import __version__
from jks_orchestrator.config import get_settings
from jks_orchestrator.core.logging import logger
from jks_orchestrator.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from jks_orchestrator.lifespan import lifespan
from jks_orchestrator.middleware import TraceIDMiddleware
from jks_orchestrator.routes import register_routes


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    # Must be set BEFORE creating FastAPI instance
    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None

    app = FastAPI(
        title=settings.project_name,
        description=settings.project_description,
        version=__version__,
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
    )

    # Register exception handlers (RFC 7807 Problem Details)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(TraceIDMiddleware)

    register_routes(app)

    logger.info(f"FastAPI application created (v{__version__})")

    return app
