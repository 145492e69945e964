"""Job endpoint response models."""

from pydantic import BaseModel, Field

from jks_orchestrator.jobs.models import CurrentInventoryItem, JobResult


class DiscoveryJobResponse(BaseModel):
    """Discovery outcome plus the paths handed to the submission callback."""

    result: JobResult
    discovered: list[str] = Field(default_factory=list, description="Keystore paths found")


class InventoryJobResponse(BaseModel):
    """Inventory outcome plus the items handed to the submission callback."""

    result: JobResult
    inventory: list[CurrentInventoryItem] = Field(
        default_factory=list, description="One item per alias"
    )
