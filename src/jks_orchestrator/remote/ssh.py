"""
SSH implementation of RemoteHandler using paramiko.

Commands run through a single ``SSHClient`` per job. Files are staged
over SFTP on the same transport, or over SCP when configured.
"""

import io
import re

import paramiko
from scp import SCPClient, SCPException

from jks_orchestrator.core.errors import RemoteCommandError, RemoteConnectionError, UploadError
from jks_orchestrator.core.logging import logger
from jks_orchestrator.remote.base import (
    KEYTOOL_ERROR,
    PASSWORD_LENGTH_MAX,
    RemoteHandler,
    mask_secrets,
)

SUDO_PREFIX = "sudo -i -S "
# Feeds a blank line to tools that prompt (keytool asks for a store password)
ECHO_PREFIX = "echo -e '\\n' | "
DEFAULT_SSH_PORT = 22

_PEM_ARMOR = re.compile(r"(-----BEGIN [A-Z0-9 ]+-----)(.*?)(-----END [A-Z0-9 ]+-----)", re.S)


def restore_private_key_line_breaks(private_key: str) -> str:
    """
    Rebuild a PEM private key whose line breaks were collapsed into spaces.

    Secrets travel through systems that flatten multi-line values; the
    armor lines keep their inner spaces, the body is re-split on whitespace.

    Args:
        private_key: PEM text, possibly on one line

    Returns:
        PEM text with one base64 line per original line
    """
    match = _PEM_ARMOR.search(private_key.strip())
    if not match:
        return private_key
    begin, body, end = match.groups()
    return "\n".join([begin, *body.split(), end]) + "\n"


def load_private_key(private_key: str) -> paramiko.PKey:
    """
    Parse private key material for public key authentication.

    Args:
        private_key: PEM/OpenSSH private key text

    Returns:
        paramiko key instance

    Raises:
        RemoteConnectionError: If no supported key type can parse it
    """
    formatted = restore_private_key_line_breaks(private_key)
    for key_class in (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key):
        try:
            return key_class.from_private_key(io.StringIO(formatted))
        except (paramiko.SSHException, ValueError):
            continue
    raise RemoteConnectionError("Unable to parse the private key supplied as server password.")


def split_host_port(server: str) -> tuple[str, int]:
    """Split ``host[:port]`` into its parts."""
    host, sep, port = server.rpartition(":")
    if sep and port.isdigit():
        return host, int(port)
    return server, DEFAULT_SSH_PORT


def format_ftp_path(path: str) -> str:
    """Convert a store directory to an absolute, forward-slash SFTP path."""
    return path if path.startswith("/") else "/" + path.replace("\\", "/")


class SSHHandler(RemoteHandler):
    """
    Shell-over-SSH remote session for Unix-like hosts.

    Secrets shorter than 100 characters are used as passwords, longer
    ones are treated as private key material.
    """

    def __init__(
        self,
        server: str,
        server_login: str,
        server_password: str,
        use_sudo: bool = False,
        use_scp: bool = False,
    ):
        """
        Initialize SSH handler.

        Args:
            server: Target host, optionally ``host:port``
            server_login: User name
            server_password: Password or private key
            use_sudo: Run file removal with sudo
            use_scp: Upload over SCP instead of SFTP
        """
        self.server = server
        self.host, self.port = split_host_port(server)
        self.server_login = server_login
        self.server_password = server_password or ""
        self.use_sudo = use_sudo
        self.use_scp = use_scp
        self._client: paramiko.SSHClient | None = None

    def initialize(self) -> None:
        """Connect and authenticate."""
        pkey = None
        password: str | None = self.server_password
        if len(self.server_password) >= PASSWORD_LENGTH_MAX:
            pkey = load_private_key(self.server_password)
            password = None

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(
                hostname=self.host,
                port=self.port,
                username=self.server_login,
                password=password,
                pkey=pkey,
                look_for_keys=False,
                allow_agent=False,
            )
        except (paramiko.SSHException, OSError) as e:
            client.close()
            logger.debug(f"Exception during Initialize... {e}")
            raise RemoteConnectionError(f"Unable to connect to {self.server} over SSH.") from e

        self._client = client
        logger.debug(f"SSH session opened: {self.host}:{self.port}")

    def terminate(self) -> None:
        """Close the SSH session."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.debug(f"SSH session closed: {self.server}")

    @property
    def client(self) -> paramiko.SSHClient:
        if self._client is None:
            raise RemoteConnectionError(f"SSH session to {self.server} is not open.")
        return self._client

    def run_command(
        self,
        command_text: str,
        arguments: list[object] | None = None,
        with_sudo: bool = False,
        passwords_to_mask: list[str | None] | None = None,
    ) -> str:
        """Run a shell command with the blank-line pacifier."""
        logger.debug(f"RunCommand: {self.server}")

        if with_sudo:
            command_text = SUDO_PREFIX + command_text
        command_text = ECHO_PREFIX + command_text
        display_command = mask_secrets(command_text, passwords_to_mask)

        try:
            logger.debug(f"RunCommand: {display_command}")
            _, stdout, stderr = self.client.exec_command(command_text)
            result = stdout.read().decode("utf-8", errors="replace")
            error = stderr.read().decode("utf-8", errors="replace")
            logger.debug(
                f"SSH Results: {display_command}::: "
                f"{mask_secrets(result, passwords_to_mask)}::: "
                f"{mask_secrets(error, passwords_to_mask)}"
            )
        except (paramiko.SSHException, OSError) as e:
            logger.debug(f"Exception during RunCommand... {e}")
            raise RemoteCommandError(f"Error running command on {self.server}.") from e

        if KEYTOOL_ERROR in result.lower():
            raise RemoteCommandError(mask_secrets(result.strip(), passwords_to_mask))

        return result

    def upload_certificate_file(self, path: str, file_name: str, cert_bytes: bytes) -> None:
        """Stage a file over SCP or SFTP."""
        logger.debug(f"UploadCertificateFile: {path} {file_name}")
        remote_path = format_ftp_path(path)

        try:
            if self.use_scp:
                with SCPClient(self.client.get_transport()) as scp:
                    scp.putfo(io.BytesIO(cert_bytes), remote_path + file_name)
            else:
                with self.client.open_sftp() as sftp:
                    sftp.chdir(remote_path)
                    sftp.putfo(io.BytesIO(cert_bytes), file_name)
        except (SCPException, paramiko.SSHException, OSError) as e:
            logger.debug(f"Upload Exception: {e}")
            raise UploadError(
                f"Error uploading {file_name} to {remote_path} on {self.server}."
            ) from e

    def remove_certificate_file(self, path: str, file_name: str) -> None:
        """Delete a staged file with ``rm``."""
        logger.debug(f"RemoveCertificateFile: {path} {file_name}")
        self.run_command(f"rm {path}{file_name}", with_sudo=self.use_sudo)

    def does_store_exist(self, path: str, file_name: str) -> bool:
        """Check the store file over SFTP, or with ``test`` under sudo."""
        logger.debug(f"DoesStoreExist: {path} {file_name}")

        if self.use_sudo:
            result = self.run_command(
                f"test -f '{path}{file_name}' && echo EXISTS", with_sudo=True
            )
            return "EXISTS" in result

        try:
            with self.client.open_sftp() as sftp:
                sftp.stat(format_ftp_path(path) + file_name)
        except FileNotFoundError:
            return False
        except (paramiko.SSHException, OSError) as e:
            raise RemoteCommandError(
                f"Unable to check {path}{file_name} on {self.server}."
            ) from e
        return True
