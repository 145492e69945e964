"""
Remote Java keystore entity.

Binds a target host, credentials, a store path and password, one remote
session and the resolved keytool location. Mutating operations are
serialized process-wide: keytool has no locking of its own and a
check/delete/upload/import/cleanup sequence is not atomic.

Lifecycle:
    store = JKSStore(server, user, secret, "/opt/certs/app.jks", "changeit", config)
    try:
        store.initialize()
        aliases = store.get_all_store_aliases()
    finally:
        store.terminate()
"""

import threading
import uuid
from collections.abc import Callable
from enum import Enum

from jks_orchestrator.core.errors import (
    AliasExistsError,
    JKSError,
    KeytoolNotFoundError,
    RemoteConnectionError,
    UploadError,
)
from jks_orchestrator.core.logging import logger
from jks_orchestrator.keytool import commands, parser
from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.models.keystore import CertificateEntry
from jks_orchestrator.remote import RemoteHandler, RemoteHandlerFactory, ServerType

# Held for every add/delete/create sequence, across all stores and jobs
modify_store_lock = threading.RLock()


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    TERMINATED = "terminated"


def split_store_path_file(path_file_name: str) -> tuple[str, str]:
    """
    Split a store location at its last path separator.

    Args:
        path_file_name: ``/opt/certs/app.jks`` or ``C:\\certs\\app.jks``

    Returns:
        Tuple of (directory with trailing separator, file name)
    """
    separator_index = path_file_name.replace("\\", "/").rfind("/")
    return path_file_name[: separator_index + 1], path_file_name[separator_index + 1:]


class JKSStore:
    """
    One Java keystore on one remote host, owned by one job.

    Attributes:
        server: Target host address
        server_id: Login name
        store_path: Store directory, with trailing separator
        store_file_name: Store file name
        store_password: Store password, may be empty
        server_type: Unix or Windows, fixed at construction
        keytool_path: Directory prefix for keytool, empty when on PATH
        discovered_stores: Stores found by the pre-run script, if any
        upload_file_path: Directory staged files are written to
    """

    def __init__(
        self,
        server: str,
        server_id: str,
        server_password: str | None,
        store_file_and_path: str | None,
        store_password: str | None,
        config: OrchestratorConfig,
        server_type: ServerType | None = None,
        handler_factory: RemoteHandlerFactory | None = None,
    ):
        self.server = server
        self.server_id = server_id
        self.server_password = server_password or ""
        self.store_password = store_password
        self.config = config

        self.store_path, self.store_file_name = split_store_path_file(store_file_and_path or "")
        self.server_type = server_type or ServerType.from_path(store_file_and_path or "")

        if config.use_separate_upload_file_path and self.server_type == ServerType.LINUX:
            self.upload_file_path = config.separate_upload_file_path
        else:
            self.upload_file_path = self.store_path

        self.keytool_path = ""
        self.discovered_stores: list[str] | None = None
        self.handler_factory = handler_factory or RemoteHandlerFactory(config)
        self.remote: RemoteHandler | None = None
        self.state = StoreState.UNINITIALIZED

    @classmethod
    def for_discovery(
        cls,
        server: str,
        server_id: str,
        server_password: str | None,
        server_type: ServerType,
        config: OrchestratorConfig,
        handler_factory: RemoteHandlerFactory | None = None,
    ) -> "JKSStore":
        """Build an entity that searches a host rather than managing one store."""
        return cls(
            server,
            server_id,
            server_password,
            None,
            None,
            config,
            server_type=server_type,
            handler_factory=handler_factory,
        )

    @property
    def is_linux(self) -> bool:
        return self.server_type == ServerType.LINUX

    @property
    def store_file(self) -> str:
        return self.store_path + self.store_file_name

    @property
    def use_sudo(self) -> bool:
        return self.is_linux and self.config.use_sudo

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, extensions: str = "") -> None:
        """
        Connect, then locate keytool.

        Args:
            extensions: Comma-separated extensions passed to the pre-run
                script (discovery only)

        Raises:
            RemoteConnectionError: If the session cannot be opened
            KeytoolNotFoundError: If keytool is unreachable and no pre-run
                script is configured
        """
        if self.state != StoreState.UNINITIALIZED:
            raise JKSError(f"Keystore session for {self.server} was already {self.state.value}.")

        self.remote = self.handler_factory.get_remote_handler(
            self.server_type, self.server, self.server_id, self.server_password
        )
        try:
            self.remote.initialize()
        except JKSError as e:
            raise RemoteConnectionError("Error attempting to connect to the remote server.") from e
        self.state = StoreState.INITIALIZED

        if not self.config.use_prerun_script and not self._is_keytool_installed():
            raise KeytoolNotFoundError(
                "Java is either not installed on the server or is not in the $PATH "
                f"environment variable for store path={self.store_path}, "
                f"file name={self.store_file_name}."
            )

        if self.config.use_prerun_script and self.is_linux:
            self._run_prerun_script(extensions)

        if self.config.find_keytool_path_on_windows and not self.is_linux:
            self._find_keytool_path_windows()

        logger.debug(f"Keystore session ready on {self.server}, keytool path='{self.keytool_path}'")

    def terminate(self) -> None:
        """Release the remote session. Safe to call more than once."""
        if self.remote is not None:
            remote, self.remote = self.remote, None
            remote.terminate()
        self.state = StoreState.TERMINATED

    def require_remote(self) -> RemoteHandler:
        if self.remote is None or self.state != StoreState.INITIALIZED:
            raise JKSError(f"Keystore session for {self.server} is not initialized.")
        return self.remote

    def _run_keytool(self, command: str, extra_secrets: list[str | None] | None = None) -> str:
        secrets = [self.store_password, *(extra_secrets or [])]
        return self.require_remote().run_command(
            command, with_sudo=self.use_sudo, passwords_to_mask=secrets
        )

    def _remove_staged_file(self, path: str, file_name: str) -> None:
        """Best-effort cleanup; failures are logged, never raised."""
        try:
            self.require_remote().remove_certificate_file(path, file_name)
        except Exception as e:
            logger.debug(f"Unable to remove staged file {path}{file_name}: {e}")

    def _is_keytool_installed(self) -> bool:
        result = self.require_remote().run_command(
            commands.keytool_installed_command(self.is_linux), with_sudo=self.use_sudo
        )
        return bool(result.strip())

    def _run_prerun_script(self, extensions: str) -> None:
        remote = self.require_remote()
        destination = self.config.prerun_script_destination_path
        cmd_file_name = uuid.uuid4().hex
        cmd_file_and_path = destination + cmd_file_name

        try:
            try:
                remote.upload_certificate_file(
                    destination, cmd_file_name, self.config.script.encode("utf-8")
                )
            except JKSError as e:
                raise UploadError("Error attempting to upload the pre-run script to the remote server.") from e

            remote.run_command(f"dos2unix {cmd_file_and_path}", with_sudo=self.config.use_sudo)
            remote.run_command(f"chmod +x {cmd_file_and_path}", with_sudo=self.config.use_sudo)

            if extensions:
                cmd_file_and_path += f" '{extensions}'"

            result = remote.run_command(cmd_file_and_path, with_sudo=self.config.use_sudo)
            prerun = parser.parse_prerun_result(result, expect_discovered=bool(extensions))
            self.keytool_path = prerun.keytool_path
            self.discovered_stores = prerun.discovered_files
        finally:
            self._remove_staged_file(destination, cmd_file_name)

    def _find_keytool_path_windows(self) -> None:
        remote = self.require_remote()
        for path in self.get_available_paths():
            result = remote.run_command(commands.find_keytool_windows_command(path))
            if result.strip():
                first = parser.split_lines(result, "\r\n")[0].strip()
                self.keytool_path = commands.format_windows_path(first[: first.rfind("\\")])
                logger.debug(f"Found keytool in {self.keytool_path}")
                break

    def get_available_paths(self) -> list[str]:
        """Device ids (``C:``, ``D:``...) of the host's local fixed disks."""
        result = self.require_remote().run_command(commands.FIXED_DISKS_COMMAND)
        return [path.strip() for path in parser.split_lines(result, "\r\n")]

    # ------------------------------------------------------------------
    # Read-only operations
    # ------------------------------------------------------------------

    def does_store_exist(self) -> bool:
        return self.require_remote().does_store_exist(self.store_path, self.store_file_name)

    def is_valid_store(self, path: str) -> bool:
        """A discovered file is a keystore when keytool can list an alias in it."""
        command = commands.validate_store_command(self.keytool_path, path)
        result = self.require_remote().run_command(command, with_sudo=self.use_sudo)
        return parser.is_valid_store_listing(result)

    def does_certificate_alias_exist(self, alias: str) -> bool:
        command = commands.alias_exists_command(
            self.keytool_path, self.store_file, alias, self.store_password
        )
        return parser.parse_alias_exists(self._run_keytool(command))

    def get_all_store_aliases(self) -> list[str]:
        command = commands.list_aliases_command(
            self.keytool_path, self.store_file, self.store_password
        )
        return parser.parse_aliases(self._run_keytool(command))

    def _list_alias(self, alias: str) -> str:
        command = commands.certificate_chain_command(
            self.keytool_path, self.store_file, self.store_password, alias
        )
        return self._run_keytool(command)

    def get_certificate_chain_for_alias(self, alias: str) -> list[str]:
        return parser.parse_certificate_chain(self._list_alias(alias))

    def get_certificate_entry(self, alias: str) -> CertificateEntry | None:
        """
        Read one alias as an inventory entry.

        Returns:
            The entry, or None when keytool printed no certificate for it
        """
        result = self._list_alias(alias)
        chain = parser.parse_certificate_chain(result)
        if not chain:
            return None
        return CertificateEntry(
            alias=alias,
            certificates=chain,
            private_key_entry=parser.is_private_key_entry(result),
        )

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def delete_certificate_by_alias(self, alias: str) -> None:
        command = commands.delete_alias_command(
            self.keytool_path, self.store_file, alias, self.store_password
        )
        with modify_store_lock:
            try:
                self._run_keytool(command)
            except JKSError as e:
                raise JKSError(
                    "Error attempting to remove certificate for store "
                    f"path={self.store_path}, file name={self.store_file_name}."
                ) from e
        logger.info(f"Removed alias {alias} from {self.store_file} on {self.server}")

    def create_certificate_store(self) -> None:
        """Create the store with a placeholder keypair, then apply default permissions."""
        command = commands.create_store_command(
            self.keytool_path, self.store_file, self.store_password
        )
        with modify_store_lock:
            self._run_keytool(command)
            if self.is_linux:
                self.require_remote().run_command(
                    f"chmod {self.config.default_linux_permissions_on_store_creation} "
                    f"'{self.store_file}'",
                    with_sudo=self.use_sudo,
                )
        logger.info(f"Created certificate store {self.store_file} on {self.server}")

    def add_certificate_to_store(self, alias: str, cert_bytes: bytes, overwrite: bool) -> None:
        """Import a certificate without a private key."""

        def build(staged_file: str) -> str:
            return commands.import_certificate_command(
                self.keytool_path, self.store_file, alias, staged_file, self.store_password
            )

        self._add_entry(build, alias, cert_bytes, ".pem", overwrite)

    def add_pfx_certificate_to_store(
        self,
        source_alias: str,
        dest_alias: str,
        cert_bytes: bytes,
        pfx_password: str,
        entry_password: str | None,
        overwrite: bool,
    ) -> None:
        """Import the key entry ``source_alias`` of a PKCS12 container as ``dest_alias``."""

        def build(staged_file: str) -> str:
            return commands.import_pkcs12_command(
                self.keytool_path,
                self.store_file,
                staged_file,
                pfx_password,
                source_alias,
                dest_alias,
                self.store_password,
                entry_password,
            )

        self._add_entry(
            build, dest_alias, cert_bytes, ".p12", overwrite, [pfx_password, entry_password]
        )

    def _add_entry(
        self,
        build_command: Callable[[str], str],
        alias: str,
        cert_bytes: bytes,
        suffix: str,
        overwrite: bool,
        extra_secrets: list[str | None] | None = None,
    ) -> None:
        file_name = commands.new_staged_file_name(suffix)
        command = build_command(self.upload_file_path + file_name)
        remote = self.require_remote()
        staged = False

        with modify_store_lock:
            try:
                if self.does_certificate_alias_exist(alias):
                    if not overwrite:
                        raise AliasExistsError(
                            f"Alias {alias} already exists in certificate store."
                        )
                    self.delete_certificate_by_alias(alias)

                staged = True
                try:
                    remote.upload_certificate_file(self.upload_file_path, file_name, cert_bytes)
                except JKSError as e:
                    raise UploadError(
                        "Error attempting to upload certificate file to the remote server."
                    ) from e

                self._run_keytool(command, extra_secrets)
            except JKSError as e:
                raise JKSError(
                    "Error attempting to add certificate for store "
                    f"path={self.store_path}, file name={self.store_file_name}."
                ) from e
            finally:
                if staged:
                    self._remove_staged_file(self.upload_file_path, file_name)

        logger.info(f"Added alias {alias} to {self.store_file} on {self.server}")
