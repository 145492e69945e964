"""
Orchestrator job configuration.

Loaded from a ``config.json`` file whose keys use the PascalCase names
hosts already ship, e.g.::

    {
        "UseSudo": "N",
        "UsePreRunScript": "N",
        "PreRunScript": "prerun.sh",
        "PreRunScriptDestinationPath": "/tmp/",
        "UseSeparateUploadFilePath": "N",
        "SeparateUploadFilePath": "/tmp/upload/",
        "FindKeytoolPathOnWindows": "N",
        "UseNegotiateAuth": "N",
        "UseSCP": "N",
        "DefaultLinuxPermissionsOnStoreCreation": "600"
    }

Flags are "Y"/"N" strings (case-insensitive).
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jks_orchestrator.core.errors import ConfigurationError
from jks_orchestrator.core.logging import logger

DEFAULT_LINUX_PERMISSION_SETTING = "600"


def _add_trailing_slash(path: str) -> str:
    return path if path.endswith("/") else path + "/"


class OrchestratorConfig(BaseModel):
    """
    Validated orchestrator settings, populated once per job.

    Attributes:
        use_sudo: Prefix Unix commands with ``sudo -i -S``
        use_prerun_script: Upload and run the pre-run script on Unix hosts
        prerun_script: File name of the pre-run script (next to config.json)
        prerun_script_destination_path: Remote directory for the script
        use_separate_upload_file_path: Stage files outside the store directory
        separate_upload_file_path: Remote staging directory (Unix only)
        find_keytool_path_on_windows: Search fixed disks for keytool.exe
        use_negotiate_auth: Use negotiate instead of basic WinRM auth
        use_scp: Upload over SCP instead of SFTP
        default_linux_permissions_on_store_creation: chmod mode for new stores
        script: Body of the pre-run script (read when enabled)
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    use_sudo: bool = Field(alias="UseSudo")
    use_prerun_script: bool = Field(alias="UsePreRunScript")
    prerun_script: str = Field(alias="PreRunScript")
    prerun_script_destination_path: str = Field(alias="PreRunScriptDestinationPath")
    use_separate_upload_file_path: bool = Field(alias="UseSeparateUploadFilePath")
    separate_upload_file_path: str = Field(alias="SeparateUploadFilePath")
    find_keytool_path_on_windows: bool = Field(alias="FindKeytoolPathOnWindows")
    use_negotiate_auth: bool = Field(alias="UseNegotiateAuth")
    use_scp: bool = Field(default=False, alias="UseSCP")
    default_linux_permissions_on_store_creation: str = Field(
        default=DEFAULT_LINUX_PERMISSION_SETTING,
        alias="DefaultLinuxPermissionsOnStoreCreation",
    )
    script: str = Field(default="", exclude=True)

    @field_validator(
        "use_sudo",
        "use_prerun_script",
        "use_separate_upload_file_path",
        "find_keytool_path_on_windows",
        "use_negotiate_auth",
        "use_scp",
        mode="before",
    )
    @classmethod
    def parse_yes_no(cls, v: Any) -> bool:
        """Accept "Y"/"N" flags; anything other than "Y" is False."""
        if isinstance(v, bool):
            return v
        if v is None:
            return False
        return str(v).strip().upper() == "Y"

    @field_validator(
        "prerun_script_destination_path", "separate_upload_file_path", mode="after"
    )
    @classmethod
    def normalize_directory(cls, v: str) -> str:
        """Remote directories are always joined with a file name."""
        return _add_trailing_slash(v) if v else v

    @field_validator("default_linux_permissions_on_store_creation", mode="before")
    @classmethod
    def default_permissions(cls, v: Any) -> str:
        """Fall back to 600 when the value is null."""
        return DEFAULT_LINUX_PERMISSION_SETTING if v is None else str(v)


def load_orchestrator_config(config_file: str | Path) -> OrchestratorConfig:
    """
    Load and validate the orchestrator configuration file.

    Args:
        config_file: Path of config.json

    Returns:
        Validated configuration, with the pre-run script body loaded
        when the script is enabled

    Raises:
        ConfigurationError: If the file is missing, malformed or lacks
            required keys
    """
    path = Path(config_file)
    if not path.is_file():
        raise ConfigurationError(f"config.json file does not exist in {path.parent}")

    try:
        contents = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Unable to parse {path}: {e}") from e

    if not isinstance(contents, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")

    try:
        config = OrchestratorConfig.model_validate(contents)
    except ValidationError as e:
        missing = [
            str(error["loc"][0]) for error in e.errors() if error["type"] == "missing"
        ]
        if missing:
            raise ConfigurationError(
                "The following configuration items are missing from the "
                f"config.json file: {', '.join(missing)}"
            ) from e
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    if config.use_prerun_script:
        script_path = path.parent / config.prerun_script
        try:
            config.script = script_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Unable to read pre-run script {script_path}"
            ) from e

    logger.debug(f"Loaded orchestrator configuration from {path}")
    return config
