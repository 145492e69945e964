"""Helpers shared by the job processors."""

import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from jks_orchestrator.config import get_settings
from jks_orchestrator.core.errors import SubmissionError, flatten_exception_messages
from jks_orchestrator.core.logging import logger
from jks_orchestrator.core.trace_context import trace_id_context
from jks_orchestrator.jobs.models import JobResult
from jks_orchestrator.models.config import OrchestratorConfig, load_orchestrator_config
from jks_orchestrator.services.jks_store import JKSStore


def split_list(value: str | None) -> list[str]:
    """Split a comma-delimited job property, dropping empty items."""
    return [item for item in (value or "").split(",") if item]


def load_job_config(config: OrchestratorConfig | None = None) -> OrchestratorConfig:
    """Use the given configuration, or read the configured config.json."""
    if config is not None:
        return config
    return load_orchestrator_config(get_settings().orchestrator_config_file)


@contextmanager
def job_trace(job_history_id: int | None) -> Iterator[str]:
    """Tag every log line of a job with one trace id."""
    trace_id = f"job-{job_history_id}" if job_history_id is not None else str(uuid.uuid4())
    token = trace_id_context.set(trace_id)
    try:
        yield trace_id
    finally:
        trace_id_context.reset(token)


def terminate_store(store: JKSStore | None) -> None:
    """Release the session without letting a close failure replace the job outcome."""
    if store is None:
        return
    try:
        store.terminate()
    except Exception as e:
        logger.warning(f"Error closing session to {store.server}: {e}")


def submit_results(
    submit: Callable[[Any], object],
    payload: Any,
    prefix: str,
    job_history_id: int | None = None,
) -> JobResult:
    """Hand results to the host callback; a callback failure is its own failure."""
    try:
        submit(payload)
    except Exception as e:
        logger.error(f"{prefix} result submission failed: {e}")
        error = SubmissionError("Error submitting job results.")
        error.__cause__ = e
        return JobResult.failure(flatten_exception_messages(error, prefix), job_history_id)

    return JobResult.success(job_history_id)
