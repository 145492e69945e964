"""Management job: add or remove one alias, or create an empty store."""

import base64

from jks_orchestrator.core.errors import JKSError, StoreNotFoundError, flatten_exception_messages
from jks_orchestrator.core.logging import logger
from jks_orchestrator.jobs.base import job_trace, load_job_config, terminate_store
from jks_orchestrator.jobs.models import (
    JobCertificate,
    JobResult,
    ManagementJobConfiguration,
    OperationType,
)
from jks_orchestrator.keytool.pkcs12 import get_source_alias
from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.remote.factory import RemoteHandlerFactory
from jks_orchestrator.services.jks_store import JKSStore

SUPPORTED_OPERATIONS = (OperationType.ADD, OperationType.REMOVE, OperationType.CREATE)


def _require_existing_store(store: JKSStore) -> None:
    if not store.does_store_exist():
        raise StoreNotFoundError(
            f"Java Keystore {store.store_path}{store.store_file_name} cannot be found."
        )


def _require_certificate(config: ManagementJobConfiguration) -> JobCertificate:
    if config.job_certificate is None or not config.job_certificate.alias:
        raise JKSError(f"{config.operation_type.value} requires a certificate alias.")
    return config.job_certificate


def _add(store: JKSStore, config: ManagementJobConfiguration) -> None:
    certificate = _require_certificate(config)
    _require_existing_store(store)

    cert_bytes = base64.b64decode(certificate.contents)

    if certificate.private_key_password:
        source_alias = get_source_alias(cert_bytes, certificate.private_key_password)
        store.add_pfx_certificate_to_store(
            source_alias,
            certificate.alias,
            cert_bytes,
            certificate.private_key_password,
            config.entry_password,
            config.overwrite,
        )
    else:
        store.add_certificate_to_store(certificate.alias, cert_bytes, config.overwrite)


def _remove(store: JKSStore, config: ManagementJobConfiguration) -> None:
    certificate = _require_certificate(config)
    _require_existing_store(store)
    store.delete_certificate_by_alias(certificate.alias)


def _create(store: JKSStore) -> None:
    if store.does_store_exist():
        logger.info(
            f"Store {store.store_path}{store.store_file_name} already exists, nothing to create"
        )
        return
    store.create_certificate_store()


def process_management_job(
    config: ManagementJobConfiguration,
    orchestrator_config: OrchestratorConfig | None = None,
    handler_factory: RemoteHandlerFactory | None = None,
) -> JobResult:
    """
    Run one management job.

    Add and Remove require the store to exist; Create on an existing store
    succeeds without touching it.

    Args:
        config: Store location, operation and certificate payload
        orchestrator_config: Configuration to use instead of config.json
        handler_factory: Transport factory override

    Returns:
        JobResult: Success, or Failure carrying the flattened error chain
    """
    details = config.certificate_store_details
    prefix = f"Site {details.store_path} on server {details.client_machine}:"

    with job_trace(config.job_history_id):
        if config.operation_type not in SUPPORTED_OPERATIONS:
            logger.warning(f"{prefix} unsupported operation {config.operation_type.value}")
            return JobResult.failure(
                f"{prefix} Unsupported operation: {config.operation_type.value}",
                config.job_history_id,
            )

        logger.debug(
            f"Begin {config.operation_type.value} on {details.store_path} "
            f"at {details.client_machine}"
        )

        store: JKSStore | None = None
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

            if config.operation_type == OperationType.ADD:
                _add(store, config)
            elif config.operation_type == OperationType.REMOVE:
                _remove(store, config)
            else:
                _create(store)
        except Exception as e:
            logger.error(f"{prefix} {config.operation_type.value} failed: {e}")
            return JobResult.failure(
                flatten_exception_messages(e, prefix), config.job_history_id
            )
        finally:
            terminate_store(store)

        logger.info(f"{prefix} {config.operation_type.value} completed")
        return JobResult.success(config.job_history_id)
