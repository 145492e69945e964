"""
Job request and result models.

These mirror what a host orchestrator hands to a keystore job and what
it expects back: one Success or Failure outcome per job, with a
human-readable failure message.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from jks_orchestrator.models.keystore import CertificateEntry


class JobStatus(str, Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


class OperationType(str, Enum):
    """Management operation kinds a host may send; only Add/Remove/Create are handled."""

    UNKNOWN = "Unknown"
    INVENTORY = "Inventory"
    ADD = "Add"
    REMOVE = "Remove"
    CREATE = "Create"
    REENROLLMENT = "Reenrollment"
    DISCOVERY = "Discovery"


class JobResult(BaseModel):
    """Outcome of one job."""

    result: JobStatus = Field(..., description="Success or Failure")
    job_history_id: int | None = Field(None, description="Host job identifier")
    failure_message: str | None = Field(None, description="Flattened error chain")

    @classmethod
    def success(cls, job_history_id: int | None = None) -> "JobResult":
        return cls(result=JobStatus.SUCCESS, job_history_id=job_history_id)

    @classmethod
    def failure(cls, message: str, job_history_id: int | None = None) -> "JobResult":
        return cls(
            result=JobStatus.FAILURE, job_history_id=job_history_id, failure_message=message
        )


class CertificateStoreDetails(BaseModel):
    """Where the store lives."""

    client_machine: str = Field(..., description="Target host address")
    store_path: str = Field(..., description="Full store path including file name")
    store_password: str | None = Field(None, description="Store password")


class JobCertificate(BaseModel):
    """Certificate payload of a management job."""

    alias: str = Field(..., description="Destination alias")
    contents: str = Field("", description="Base64 certificate or PKCS12 container")
    private_key_password: str | None = Field(
        None, description="PKCS12 password; set when the payload carries a private key"
    )


class DiscoveryJobConfiguration(BaseModel):
    """
    Discovery request.

    List fields are comma-delimited, as hosts send them.
    """

    job_history_id: int | None = None
    client_machine: str = Field(..., description="Target host address")
    server_username: str = Field("", description="Login")
    server_password: str | None = Field(None, description="Password or private key")
    dirs: str = Field("", description="Search roots")
    extensions: str = Field("", description="Extensions, 'noext' for none")
    ignored_dirs: str = Field("", alias="ignoreddirs", description="Ignored path prefixes")
    patterns: str = Field("", description="File name patterns")

    model_config = {"populate_by_name": True}


class InventoryJobConfiguration(BaseModel):
    job_history_id: int | None = None
    server_username: str = ""
    server_password: str | None = None
    certificate_store_details: CertificateStoreDetails


class ManagementJobConfiguration(BaseModel):
    job_history_id: int | None = None
    server_username: str = ""
    server_password: str | None = None
    certificate_store_details: CertificateStoreDetails
    operation_type: OperationType
    overwrite: bool = False
    job_certificate: JobCertificate | None = None
    job_properties: dict[str, Any] | None = None

    @property
    def entry_password(self) -> str:
        """Distinct key entry password, empty when not supplied."""
        value = (self.job_properties or {}).get("entryPassword")
        return str(value) if value else ""


class CurrentInventoryItem(BaseModel):
    """One inventoried alias as reported to the host."""

    item_status: str = "Unknown"
    alias: str
    private_key_entry: bool
    use_chain_level: bool
    certificates: list[str]

    @classmethod
    def from_entry(cls, entry: CertificateEntry) -> "CurrentInventoryItem":
        return cls(
            alias=entry.alias,
            private_key_entry=entry.private_key_entry,
            use_chain_level=entry.use_chain_level,
            certificates=entry.certificates,
        )
