"""
Routes registration for the FastAPI application.

Centralizes all router registrations for clean application setup.
"""

from fastapi import FastAPI

from jks_orchestrator.api.v1.health.router import router as health_router
from jks_orchestrator.api.v1.jobs.router import router as jobs_router


def register_routes(app: FastAPI) -> None:
    """
    Register all application routers.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix)
    app.include_router(health_router)

    # Job endpoints (versioned API)
    app.include_router(jobs_router)
