"""
Job endpoints.

Each request runs one job to completion. The handlers are plain ``def``
so FastAPI runs them in its worker threadpool: the SSH and WinRM
libraries block.
"""

from fastapi import APIRouter

from jks_orchestrator.api.v1.jobs.models import DiscoveryJobResponse, InventoryJobResponse
from jks_orchestrator.core.logging import logger
from jks_orchestrator.di import JobDependenciesDep
from jks_orchestrator.jobs import (
    process_discovery_job,
    process_inventory_job,
    process_management_job,
)
from jks_orchestrator.jobs.models import (
    CurrentInventoryItem,
    DiscoveryJobConfiguration,
    InventoryJobConfiguration,
    JobResult,
    ManagementJobConfiguration,
)

router = APIRouter()


@router.post(
    "/discovery",
    response_model=DiscoveryJobResponse,
    summary="Search a host for keystore files",
)
def run_discovery_job(
    config: DiscoveryJobConfiguration, deps: JobDependenciesDep
) -> DiscoveryJobResponse:
    submitted: list[str] = []

    result = process_discovery_job(
        config,
        submitted.extend,
        orchestrator_config=deps.orchestrator_config,
        handler_factory=deps.handler_factory,
    )

    logger.info(f"Discovery job finished: {result.result.value}")
    return DiscoveryJobResponse(result=result, discovered=submitted)


@router.post(
    "/inventory",
    response_model=InventoryJobResponse,
    summary="List every alias of a keystore",
)
def run_inventory_job(
    config: InventoryJobConfiguration, deps: JobDependenciesDep
) -> InventoryJobResponse:
    submitted: list[CurrentInventoryItem] = []

    result = process_inventory_job(
        config,
        submitted.extend,
        orchestrator_config=deps.orchestrator_config,
        handler_factory=deps.handler_factory,
    )

    logger.info(f"Inventory job finished: {result.result.value}")
    return InventoryJobResponse(result=result, inventory=submitted)


@router.post(
    "/management",
    response_model=JobResult,
    summary="Add or remove an alias, or create an empty keystore",
)
def run_management_job(
    config: ManagementJobConfiguration, deps: JobDependenciesDep
) -> JobResult:
    result = process_management_job(
        config,
        orchestrator_config=deps.orchestrator_config,
        handler_factory=deps.handler_factory,
    )

    logger.info(f"Management job finished: {result.result.value}")
    return result
