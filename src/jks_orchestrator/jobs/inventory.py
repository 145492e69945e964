"""Inventory job: report every alias of one keystore."""

from collections.abc import Callable

from jks_orchestrator.core.errors import StoreNotFoundError, flatten_exception_messages
from jks_orchestrator.core.logging import logger
from jks_orchestrator.jobs.base import job_trace, load_job_config, submit_results, terminate_store
from jks_orchestrator.jobs.models import (
    CurrentInventoryItem,
    InventoryJobConfiguration,
    JobResult,
)
from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.remote.factory import RemoteHandlerFactory
from jks_orchestrator.services.jks_store import JKSStore


def process_inventory_job(
    config: InventoryJobConfiguration,
    submit_inventory: Callable[[list[CurrentInventoryItem]], object],
    orchestrator_config: OrchestratorConfig | None = None,
    handler_factory: RemoteHandlerFactory | None = None,
) -> JobResult:
    """Run one inventory job and submit the item list through the host callback."""
    details = config.certificate_store_details
    prefix = f"Site {details.store_path} on server {details.client_machine}:"

    with job_trace(config.job_history_id):
        logger.debug(f"Begin inventory of {details.store_path} on {details.client_machine}")

        store: JKSStore | None = None
        items: list[CurrentInventoryItem] = []
        try:
            job_settings = load_job_config(orchestrator_config)

            store = JKSStore(
                details.client_machine,
                config.server_username,
                config.server_password,
                details.store_path,
                details.store_password,
                job_settings,
                handler_factory=handler_factory,
            )
            store.initialize()

            if not store.does_store_exist():
                raise StoreNotFoundError(
                    f"Java Keystore {store.store_path}{store.store_file_name} cannot be found."
                )

            for alias in store.get_all_store_aliases():
                entry = store.get_certificate_entry(alias)
                if entry is None:
                    continue
                items.append(CurrentInventoryItem.from_entry(entry))
        except Exception as e:
            logger.error(f"{prefix} inventory failed: {e}")
            return JobResult.failure(
                flatten_exception_messages(e, prefix), config.job_history_id
            )
        finally:
            terminate_store(store)

        logger.info(f"{prefix} inventoried {len(items)} alias(es)")
        return submit_results(submit_inventory, items, prefix, config.job_history_id)
