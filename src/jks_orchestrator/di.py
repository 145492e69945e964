"""
Dependency injection for the job endpoints.

Uses FastAPI's Depends with typing.Annotated, so tests can swap the
transport factory through ``app.dependency_overrides``.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends

from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.remote.factory import RemoteHandlerFactory


@dataclass
class JobDependencies:
    """
    What a job processor needs besides its request.

    ``None`` values make the processor read config.json and build the real
    SSH/WinRM factory itself.
    """

    orchestrator_config: OrchestratorConfig | None = None
    handler_factory: RemoteHandlerFactory | None = None

def get_job_dependencies() -> JobDependencies:
    return JobDependencies()

JobDependenciesDep = Annotated[JobDependencies, Depends(get_job_dependencies)]
"""Injected JobDependencies."""
