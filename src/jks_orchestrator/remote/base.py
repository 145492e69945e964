"""
Abstract interface for remote command execution.

A handler owns one live session to one host and exposes the capability
set every keystore operation is built from:
- Command execution (optionally privileged)
- Staged file upload and removal
- Store file existence checks
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

KEYTOOL_ERROR = "password was incorrect"
PASSWORD_MASK_VALUE = "[PASSWORD]"
PASSWORD_LENGTH_MAX = 100


def mask_secrets(text: str, secrets: Iterable[str | None] | None) -> str:
    """
    Replace every configured secret in ``text`` with ``[PASSWORD]``.

    Literal substring replacement only; a secret that was altered while
    the command was built (quoting, escaping) is not masked.

    Args:
        text: Command or output about to be logged
        secrets: Secrets to mask, empty values are ignored

    Returns:
        Text safe to log
    """
    if not secrets:
        return text
    for secret in secrets:
        if secret:
            text = text.replace(secret, PASSWORD_MASK_VALUE)
    return text


class RemoteHandler(ABC):
    """
    Abstract interface for a remote session.

    Implementations are not thread-safe: one handler belongs to one job.
    """

    server: str

    @abstractmethod
    def initialize(self) -> None:
        """
        Open the session.

        Raises:
            Exception: If the connection or authentication fails
        """
        pass

    @abstractmethod
    def terminate(self) -> None:
        """Close the session. Safe to call more than once."""
        pass

    @abstractmethod
    def run_command(
        self,
        command_text: str,
        arguments: list[object] | None = None,
        with_sudo: bool = False,
        passwords_to_mask: list[str | None] | None = None,
    ) -> str:
        """
        Run a command on the remote host.

        Args:
            command_text: Command line or script text
            arguments: Positional arguments bound to the script (script
                variant only)
            with_sudo: Run with privilege escalation (shell variant only)
            passwords_to_mask: Secrets removed from logged command lines

        Returns:
            Text output of the command

        Raises:
            RemoteCommandError: If the command fails or keytool reports
                an incorrect password
        """
        pass

    @abstractmethod
    def upload_certificate_file(self, path: str, file_name: str, cert_bytes: bytes) -> None:
        """
        Write bytes to ``path + file_name`` on the remote host.

        Args:
            path: Remote directory, with trailing separator
            file_name: Remote file name
            cert_bytes: Content to write
        """
        pass

    @abstractmethod
    def remove_certificate_file(self, path: str, file_name: str) -> None:
        """
        Delete ``path + file_name`` on the remote host.

        Args:
            path: Remote directory, with trailing separator
            file_name: Remote file name
        """
        pass

    @abstractmethod
    def does_store_exist(self, path: str, file_name: str) -> bool:
        """
        Check whether ``path + file_name`` exists on the remote host.

        Args:
            path: Remote directory, with trailing separator
            file_name: Remote file name

        Returns:
            True if the file exists, False otherwise
        """
        pass
