"""
Remote session transports.

Two mutually exclusive variants behind one contract:
- ssh: paramiko shell session for Unix-like hosts
- winrm: pypsrp PowerShell runspace for Windows hosts
"""

from jks_orchestrator.remote.base import (
    KEYTOOL_ERROR,
    PASSWORD_LENGTH_MAX,
    PASSWORD_MASK_VALUE,
    RemoteHandler,
    mask_secrets,
)
from jks_orchestrator.remote.factory import RemoteHandlerFactory, ServerType

__all__ = [
    "KEYTOOL_ERROR",
    "PASSWORD_LENGTH_MAX",
    "PASSWORD_MASK_VALUE",
    "RemoteHandler",
    "RemoteHandlerFactory",
    "ServerType",
    "mask_secrets",
]
