"""
WinRM implementation of RemoteHandler using pypsrp.

Commands run as PowerShell script text inside one runspace pool per job.
Binary uploads are passed as a script argument so payloads never appear
on the command line.
"""

from urllib.parse import urlparse

from pypsrp.powershell import PowerShell, RunspacePool
from pypsrp.wsman import WSMan

from jks_orchestrator.core.errors import RemoteCommandError, RemoteConnectionError, UploadError
from jks_orchestrator.core.logging import logger
from jks_orchestrator.remote.base import KEYTOOL_ERROR, RemoteHandler, mask_secrets

# keytool writes these to stderr on success
IGNORED_ERROR1 = "importing keystore"
IGNORED_ERROR2 = "warning:"
IGNORED_ERROR3 = "certificate was added to keystore"

DEFAULT_HTTP_PORT = 5985
DEFAULT_HTTPS_PORT = 5986

UPLOAD_SCRIPT = """
param($contents)

Set-Content '{target}' -Encoding Byte -Value $contents
"""


def parse_wsman_target(server: str) -> tuple[str, int, bool]:
    """
    Split a WinRM target into host, port and TLS flag.

    Args:
        server: ``http://host:5985``, ``https://host`` or a bare host name

    Returns:
        Tuple of (host, port, ssl)
    """
    parsed = urlparse(server if "://" in server else f"http://{server}")
    ssl = parsed.scheme.lower() == "https"
    port = parsed.port or (DEFAULT_HTTPS_PORT if ssl else DEFAULT_HTTP_PORT)
    return parsed.hostname or server, port, ssl


def rewrite_keytool_invocation(command_text: str) -> str:
    """
    Quote the keytool executable and feed it a blank line.

    ``C:\\Java\\bin\\keytool -list ...`` becomes
    ``echo '' | & 'C:\\Java\\bin\\keytool' -list ...``.
    """
    end = command_text.lower().find("keytool ") + len("keytool")
    return f"echo '' | & '{command_text[:end]}'{command_text[end:]}"


def collect_errors(error_records: list[object]) -> str:
    """
    Join error stream records into one message.

    Returns an empty string when keytool only reported one of its benign
    diagnostics.
    """
    errors = ""
    for error_record in error_records:
        error = str(error_record)
        lowered = error.lower()
        if (
            lowered.startswith(IGNORED_ERROR1)
            or IGNORED_ERROR2 in lowered
            or IGNORED_ERROR3 in lowered
        ):
            return ""
        errors += error + "   "
    return errors


class WinRMHandler(RemoteHandler):
    """PowerShell remoting session for Windows hosts."""

    def __init__(
        self,
        server: str,
        server_login: str | None = None,
        server_password: str | None = None,
        use_negotiate_auth: bool = False,
    ):
        """
        Initialize WinRM handler.

        Args:
            server: WinRM endpoint, e.g. ``http://host:5985``
            server_login: User name; when empty the current identity is used
            server_password: Password
            use_negotiate_auth: Negotiate (Kerberos/NTLM) instead of basic auth
        """
        self.server = server
        self.host, self.port, self.ssl = parse_wsman_target(server)
        self.server_login = server_login or None
        self.server_password = server_password or None
        self.auth = "negotiate" if use_negotiate_auth else "basic"
        self._wsman: WSMan | None = None
        self._pool: RunspacePool | None = None

    def initialize(self) -> None:
        """Open the runspace pool."""
        logger.debug(f"WinRM Authentication Mechanism: {self.auth}")
        try:
            self._wsman = WSMan(
                self.host,
                port=self.port,
                ssl=self.ssl,
                username=self.server_login,
                password=self.server_password,
                auth=self.auth,
            )
            self._pool = RunspacePool(self._wsman)
            self._pool.open()
        except Exception as e:
            logger.debug(f"Exception during Initialize... {e}")
            raise RemoteConnectionError(f"Unable to open a WinRM session to {self.server}.") from e

    def terminate(self) -> None:
        """Close the runspace pool and the WSMan transport."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
        if self._wsman is not None:
            self._wsman.close()
            self._wsman = None

    @property
    def pool(self) -> RunspacePool:
        if self._pool is None:
            raise RemoteConnectionError(f"WinRM session to {self.server} is not open.")
        return self._pool

    def run_command(
        self,
        command_text: str,
        arguments: list[object] | None = None,
        with_sudo: bool = False,
        passwords_to_mask: list[str | None] | None = None,
    ) -> str:
        """Run script text; ``with_sudo`` does not apply to Windows."""
        logger.debug(f"RunCommand: {self.server}")

        if "keytool " in command_text.lower():
            command_text = rewrite_keytool_invocation(command_text)

        ps = PowerShell(self.pool)
        ps.add_script(command_text)
        for argument in arguments or []:
            ps.add_argument(argument)

        display_command = mask_secrets(command_text, passwords_to_mask)
        logger.debug(f"RunCommand: {display_command}")

        try:
            output = ps.invoke()
        except Exception as e:
            logger.debug(f"Exception during RunCommand... {e}")
            raise RemoteCommandError(f"Error running command on {self.server}.") from e

        result = "".join(f"{line}\r\n" for line in output if line is not None)

        if ps.had_errors:
            errors = collect_errors(ps.streams.error)
            if errors:
                raise RemoteCommandError(mask_secrets(errors, passwords_to_mask))
        else:
            logger.debug(
                f"WinRM Results: {display_command}::: "
                f"{mask_secrets(result, passwords_to_mask)}"
            )

        if KEYTOOL_ERROR in result.lower():
            raise RemoteCommandError(mask_secrets(result.strip(), passwords_to_mask))

        return result

    def upload_certificate_file(self, path: str, file_name: str, cert_bytes: bytes) -> None:
        """Write bytes with a parameterized ``Set-Content`` script."""
        logger.debug(f"UploadCertificateFile: {path} {file_name}")
        try:
            self.run_command(UPLOAD_SCRIPT.format(target=path + file_name), [cert_bytes])
        except RemoteCommandError as e:
            raise UploadError(f"Error uploading {file_name} to {path} on {self.server}.") from e

    def remove_certificate_file(self, path: str, file_name: str) -> None:
        """Delete a staged file."""
        logger.debug(f"RemoveCertificateFile: {path} {file_name}")
        self.run_command(f"rm '{path}{file_name}'")

    def does_store_exist(self, path: str, file_name: str) -> bool:
        """List the file with ``dir``; a "does not exist" error means False."""
        logger.debug(f"DoesStoreExist: {path} {file_name}")
        try:
            result = self.run_command(f"dir '{path}{file_name}'")
        except RemoteCommandError as e:
            if "does not exist" in str(e).lower():
                return False
            raise
        return "file not found" not in result.lower()
