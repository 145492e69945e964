"""Keystore inventory and pre-run script models."""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class CertificateEntry:
    """
    One alias read from a keystore.

    Attributes:
        alias: Entry name, unique within the store
        certificates: PEM certificates, leaf first
        private_key_entry: Whether keytool reports a PrivateKeyEntry
    """

    alias: str
    certificates: list[str] = field(default_factory=list)
    private_key_entry: bool = False

    @property
    def use_chain_level(self) -> bool:
        """True when the entry holds a chain rather than a single certificate."""
        return len(self.certificates) > 1


class PrerunResult(BaseModel):
    """JSON envelope printed by the pre-run script."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    keytool_path: str = Field(default="", alias="KeyToolPath")
    discovered_files: list[str] | None = Field(default=None, alias="DiscoveredFiles")
