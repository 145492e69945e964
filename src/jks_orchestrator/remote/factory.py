"""
Remote handler factory.

Selects the transport variant for a server type:
- linux: SSHHandler (paramiko)
- windows: WinRMHandler (pypsrp)

The variant is chosen once per keystore; sessions never mix variants.
"""

from enum import Enum

from jks_orchestrator.core.logging import logger
from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.remote.base import RemoteHandler


class ServerType(str, Enum):
    """Remote host family, derived from the store path convention."""

    LINUX = "linux"
    WINDOWS = "windows"

    @classmethod
    def from_path(cls, path: str) -> "ServerType":
        """Unix store paths start with ``/``; anything else is Windows."""
        return cls.LINUX if path.startswith("/") else cls.WINDOWS


class RemoteHandlerFactory:
    """
    Factory for creating remote handler instances.

    Usage:
        factory = RemoteHandlerFactory(config)
        handler = factory.get_remote_handler(ServerType.LINUX, server, user, secret)
    """

    def __init__(self, config: OrchestratorConfig):
        """
        Initialize remote handler factory.

        Args:
            config: Orchestrator configuration (sudo, SCP, auth toggles)
        """
        self.config = config

    def get_remote_handler(
        self,
        server_type: ServerType,
        server: str,
        server_login: str,
        server_password: str,
    ) -> RemoteHandler:
        """
        Get the remote handler for a server type.

        Args:
            server_type: Host family
            server: Target host address
            server_login: User name
            server_password: Password or private key

        Returns:
            Unconnected RemoteHandler implementation

        Raises:
            ValueError: If server type is not supported
        """
        if server_type == ServerType.LINUX:
            from jks_orchestrator.remote.ssh import SSHHandler

            logger.debug(f"Using SSH transport for {server}")
            return SSHHandler(
                server,
                server_login,
                server_password,
                use_sudo=self.config.use_sudo,
                use_scp=self.config.use_scp,
            )

        elif server_type == ServerType.WINDOWS:
            from jks_orchestrator.remote.winrm import WinRMHandler

            logger.debug(f"Using WinRM transport for {server}")
            return WinRMHandler(
                server,
                server_login,
                server_password,
                use_negotiate_auth=self.config.use_negotiate_auth,
            )

        else:
            raise ValueError(f"Unsupported server type: {server_type}")
