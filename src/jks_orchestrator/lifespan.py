"""
Application lifecycle management.

Handles startup and shutdown events for the FastAPI application.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from jks_orchestrator.config import get_settings
from jks_orchestrator.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting JKS orchestrator...")
    logger.info(f"Application version: {app.version}")

    # config.json is read per job; a missing file only fails the jobs
    config_file = Path(get_settings().orchestrator_config_file)
    if not config_file.is_file():
        logger.warning(f"Orchestrator config file {config_file} not found, jobs will fail")

    yield

    logger.info("Shutting down JKS orchestrator...")
