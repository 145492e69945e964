"""Global pytest configuration and fixtures for all tests."""

import os
import threading
import time

import pytest

from jks_orchestrator.models.config import OrchestratorConfig
from jks_orchestrator.remote.base import RemoteHandler


@pytest.fixture(scope="session", autouse=True)
def set_test_env_vars():
    """
    Set environment variables for testing.

    Keeps docs disabled and logging quiet; restores the original values
    after the session.
    """
    original_env = {}

    test_env_vars = {
        "ENABLE_DOCS": "false",
        "LOG_LEVEL": "DEBUG",
    }

    for key, value in test_env_vars.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


class FakeRemoteHandler(RemoteHandler):
    """
    Recording RemoteHandler.

    ``responses`` is an ordered list of (substring, output) rules; the
    first rule whose substring appears in the command wins. An exception
    instance as output is raised instead of returned.
    """

    def __init__(self, events: list | None = None, delay: float = 0.0):
        self.responses: list[tuple[str, object]] = []
        self.default_responses: list[tuple[str, object]] = [
            ("which keytool", "/usr/bin/keytool\n"),
            ("java -version", 'openjdk version "17.0.2"\r\n'),
        ]
        self.commands: list[str] = []
        self.sudo_flags: list[bool] = []
        self.masked: list[list] = []
        self.uploads: list[tuple[str, str, bytes]] = []
        self.removed: list[tuple[str, str]] = []
        self.store_exists = True
        self.connect_error: Exception | None = None
        self.upload_error: Exception | None = None
        self.initialized = False
        self.terminated = False
        self.events = events if events is not None else []
        self.delay = delay

    def _record(self, operation: str) -> None:
        self.events.append((threading.get_ident(), operation))
        if self.delay:
            time.sleep(self.delay)

    def initialize(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.initialized = True

    def terminate(self) -> None:
        self.terminated = True

    def run_command(
        self,
        command_text,
        arguments=None,
        with_sudo=False,
        passwords_to_mask=None,
    ) -> str:
        self.commands.append(command_text)
        self.sudo_flags.append(with_sudo)
        self.masked.append(list(passwords_to_mask or []))
        self._record("run")

        for substring, output in [*self.responses, *self.default_responses]:
            if substring in command_text:
                if isinstance(output, Exception):
                    raise output
                return output
        return ""

    def upload_certificate_file(self, path, file_name, cert_bytes) -> None:
        self._record("upload")
        if self.upload_error is not None:
            raise self.upload_error
        self.uploads.append((path, file_name, cert_bytes))

    def remove_certificate_file(self, path, file_name) -> None:
        self._record("remove")
        self.removed.append((path, file_name))

    def does_store_exist(self, path, file_name) -> bool:
        return self.store_exists


class FakeHandlerFactory:
    """Hands out one prepared FakeRemoteHandler and records the request."""

    def __init__(self, handler: FakeRemoteHandler):
        self.handler = handler
        self.requests: list[tuple] = []

    def get_remote_handler(self, server_type, server, server_login, server_password):
        self.requests.append((server_type, server, server_login, server_password))
        return self.handler


@pytest.fixture
def fake_remote_class():
    """The FakeRemoteHandler class, for tests that need several instances."""
    return FakeRemoteHandler


@pytest.fixture
def fake_factory_class():
    return FakeHandlerFactory


@pytest.fixture
def fake_remote():
    """A fresh recording fake transport."""
    return FakeRemoteHandler()


@pytest.fixture
def handler_factory(fake_remote):
    """Factory returning ``fake_remote``."""
    return FakeHandlerFactory(fake_remote)


@pytest.fixture
def orchestrator_config():
    """Configuration with every toggle off."""
    return OrchestratorConfig(
        use_sudo=False,
        use_prerun_script=False,
        prerun_script="",
        prerun_script_destination_path="/tmp/",
        use_separate_upload_file_path=False,
        separate_upload_file_path="/tmp/upload/",
        find_keytool_path_on_windows=False,
        use_negotiate_auth=False,
    )


@pytest.fixture
def config_json_data():
    """Raw config.json contents as hosts ship them."""
    return {
        "UseSudo": "N",
        "UsePreRunScript": "N",
        "PreRunScript": "",
        "PreRunScriptDestinationPath": "/tmp",
        "UseSeparateUploadFilePath": "N",
        "SeparateUploadFilePath": "/tmp/upload",
        "FindKeytoolPathOnWindows": "N",
        "UseNegotiateAuth": "N",
    }


@pytest.fixture
def leaf_pem():
    return "-----BEGIN CERTIFICATE-----\nMIIBleaf\n-----END CERTIFICATE-----"


@pytest.fixture
def issuer_pem():
    return "-----BEGIN CERTIFICATE-----\nMIIBissuer\n-----END CERTIFICATE-----"


@pytest.fixture
def chain_listing(leaf_pem, issuer_pem):
    """``keytool -list -rfc`` output for a key entry with a two certificate chain."""
    return (
        "Alias name: web01\r\n"
        "Creation date: Jan 1, 2025\r\n"
        "Entry type: PrivateKeyEntry\r\n"
        "Certificate chain length: 2\r\n"
        "Certificate[1]:\r\n"
        f"{leaf_pem}\r\n"
        "Certificate[2]:\r\n"
        f"{issuer_pem}\r\n"
    )
