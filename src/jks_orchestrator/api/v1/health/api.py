"""Health check endpoint."""

from fastapi import APIRouter

from jks_orchestrator import __version__
from jks_orchestrator.api.v1.health.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Service status and version
    """
    return HealthResponse(status="ok", version=__version__, message="Service is healthy")
