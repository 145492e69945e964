"""
Job adapters.

Each processor takes a host job configuration, drives a JKSStore and
returns exactly one JobResult.
"""

from jks_orchestrator.jobs.discovery import process_discovery_job
from jks_orchestrator.jobs.inventory import process_inventory_job
from jks_orchestrator.jobs.management import process_management_job
from jks_orchestrator.jobs.models import JobResult, JobStatus

__all__ = [
    "JobResult",
    "JobStatus",
    "process_discovery_job",
    "process_inventory_job",
    "process_management_job",
]
