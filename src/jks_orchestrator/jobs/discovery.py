"""Discovery job: search a host for keystore files and submit the paths found."""

from collections.abc import Callable

from jks_orchestrator.core.errors import flatten_exception_messages
from jks_orchestrator.core.logging import logger
from jks_orchestrator.jobs.base import (
    job_trace,
    load_job_config,
    split_list,
    submit_results,
    terminate_store,
)
from jks_orchestrator.jobs.models import DiscoveryJobConfiguration, JobResult
from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.remote.factory import RemoteHandlerFactory, ServerType
from jks_orchestrator.services.discovery import DiscoveryEngine, DiscoveryRequest
from jks_orchestrator.services.jks_store import JKSStore


def process_discovery_job(
    config: DiscoveryJobConfiguration,
    submit_discovery: Callable[[list[str]], object],
    orchestrator_config: OrchestratorConfig | None = None,
    handler_factory: RemoteHandlerFactory | None = None,
) -> JobResult:
    """
    Run one discovery job.

    Args:
        config: Host, credentials and search criteria
        submit_discovery: Host callback receiving the discovered paths
        orchestrator_config: Configuration to use instead of config.json
        handler_factory: Transport factory override

    Returns:
        JobResult: Success after a successful submission, Failure otherwise
    """
    prefix = f"Server {config.client_machine}:"

    with job_trace(config.job_history_id):
        logger.debug(f"Begin discovery on {config.client_machine}")

        store: JKSStore | None = None
        try:
            job_settings = load_job_config(orchestrator_config)

            request = DiscoveryRequest(
                paths=split_list(config.dirs),
                extensions=split_list(config.extensions),
                file_names=split_list(config.patterns),
                ignored_dirs=split_list(config.ignored_dirs),
            )

            store = JKSStore.for_discovery(
                config.client_machine,
                config.server_username,
                config.server_password,
                ServerType.from_path(request.paths[0]),
                job_settings,
                handler_factory=handler_factory,
            )
            store.initialize(",".join(request.extensions))

            locations = DiscoveryEngine(store).discover(request)
        except Exception as e:
            logger.error(f"{prefix} discovery failed: {e}")
            return JobResult.failure(
                flatten_exception_messages(e, prefix), config.job_history_id
            )
        finally:
            terminate_store(store)

        logger.info(f"{prefix} discovered {len(locations)} keystore(s)")
        return submit_results(submit_discovery, locations, prefix, config.job_history_id)
