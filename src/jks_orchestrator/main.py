"""
Main FastAPI application entry point.

Run with ``uvicorn jks_orchestrator.main:app`` or ``jks-orchestrator``.
"""

from jks_orchestrator.application import create_app
from jks_orchestrator.config import get_settings
from jks_orchestrator.core.logging import intercept_standard_logging

# Intercept logs from uvicorn, paramiko and pypsrp
intercept_standard_logging()

app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "jks_orchestrator.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


if __name__ == "__main__":
    run()
