"""
keytool and search command builders.

Every function here returns the exact command text sent to the remote
host. Passwords are single-quoted; a flag naming a store password is
left out entirely when the password is empty.
"""

import uuid

NO_EXTENSION = "noext"
FULL_SCAN = "fullscan"

CREATE_STORE_DNAME = "cn=New Certificate Store"
CREATE_STORE_ALIAS = "NewCertStore"
CREATE_STORE_VALIDITY_DAYS = 1

FIXED_DISKS_COMMAND = (
    "Get-WmiObject Win32_Logicaldisk -Filter \"DriveType = '3'\" | % {$_.DeviceId}"
)


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def password_flag(flag: str, password: str | None) -> str:
    """``-flag 'password'``, or an empty string for an empty password."""
    return f"-{flag} '{password}'" if password else ""


def format_store_password(store_password: str | None) -> str:
    return password_flag("storepass", store_password)


def new_staged_file_name(suffix: str) -> str:
    """Random file name for a staged upload, e.g. ``3f2a...9c.pem``."""
    return uuid.uuid4().hex + suffix


def list_aliases_command(keytool_path: str, store: str, store_password: str | None) -> str:
    return _join(
        f"{keytool_path}keytool -list -v -keystore '{store}'",
        format_store_password(store_password),
    )


def certificate_chain_command(
    keytool_path: str, store: str, store_password: str | None, alias: str
) -> str:
    return _join(
        f"{keytool_path}keytool -list -rfc -keystore '{store}'",
        format_store_password(store_password),
        f"-alias '{alias}'",
    )


def alias_exists_command(
    keytool_path: str, store: str, alias: str, store_password: str | None
) -> str:
    return _join(
        f"{keytool_path}keytool -list -keystore '{store}' -alias '{alias}'",
        format_store_password(store_password),
    )


def delete_alias_command(
    keytool_path: str, store: str, alias: str, store_password: str | None
) -> str:
    return _join(
        f"{keytool_path}keytool -delete -alias '{alias}' -keystore '{store}'",
        format_store_password(store_password),
    )


def create_store_command(keytool_path: str, store: str, store_password: str | None) -> str:
    """
    keytool cannot create an empty store, so generate a throwaway keypair
    valid for one day.
    """
    return _join(
        f"{keytool_path}keytool -genkeypair -keystore '{store}'",
        format_store_password(store_password),
        f'-dname "{CREATE_STORE_DNAME}" -keyalg RSA',
        f'-validity {CREATE_STORE_VALIDITY_DAYS} -alias "{CREATE_STORE_ALIAS}"',
    )


def import_certificate_command(
    keytool_path: str,
    store: str,
    alias: str,
    staged_file: str,
    store_password: str | None,
) -> str:
    return _join(
        f"{keytool_path}keytool -import -alias '{alias}' -keystore '{store}'",
        f"-file '{staged_file}'",
        password_flag("deststorepass", store_password),
        "-noprompt",
    )


def import_pkcs12_command(
    keytool_path: str,
    store: str,
    staged_file: str,
    pfx_password: str,
    source_alias: str,
    dest_alias: str,
    store_password: str | None,
    entry_password: str | None = None,
) -> str:
    """The entry password falls back to the store password when unset."""
    return _join(
        f"{keytool_path}keytool -importkeystore -srckeystore '{staged_file}'",
        "-srcstoretype PKCS12",
        password_flag("srcstorepass", pfx_password),
        f"-srcalias '{source_alias}'",
        f"-destkeystore '{store}' -destalias '{dest_alias}' -deststoretype JKS",
        password_flag("destkeypass", entry_password or store_password),
        password_flag("deststorepass", store_password),
        "-noprompt",
    )


def validate_store_command(keytool_path: str, path: str) -> str:
    return f"{keytool_path}keytool -v -list -keystore '{path}'"


def keytool_installed_command(is_linux: bool) -> str:
    return "which keytool" if is_linux else "java -version 2>&1"


def format_windows_path(path: str) -> str:
    """Ensure a Windows directory ends with a backslash."""
    return path if path.endswith("\\") else path + "\\"


def find_keytool_windows_command(path: str) -> str:
    return (
        f"(Get-ChildItem -Path {format_windows_path(path)} -Recurse "
        "-ErrorAction SilentlyContinue -Include keytool.exe).fullname"
    )


def find_stores_linux_command(
    paths: list[str], extensions: list[str], file_names: list[str]
) -> str | None:
    """
    Build one ``find`` over all search roots.

    Patterns are crossed with extensions and OR-ed together. The
    ``noext`` extension matches names without a dot.

    Returns:
        The command, or None when every extension is ``noext`` (no search
        is run in that case)
    """
    if not any(extension.lower() != NO_EXTENSION for extension in extensions):
        return None

    predicates = []
    for extension in extensions:
        for file_name in file_names:
            if extension.lower() == NO_EXTENSION:
                predicates.append(f"-iname '{file_name.strip()}' ! -iname '*.*'")
            else:
                predicates.append(f"-iname '{file_name.strip()}.{extension.strip()}'")

    return f"find {' '.join(paths)} {' -or '.join(predicates)}"


def find_stores_windows_command(
    path: str, extensions: list[str], file_names: list[str]
) -> str | None:
    """
    One recursive ``Get-ChildItem`` with an include filter per pattern.

    ``-Include`` cannot express "no dot in the name", so ``noext`` adds no
    filter. Returns None when nothing is left to include.
    """
    includes = [
        f"{file_name.strip()}.{extension.strip()}"
        for extension in extensions
        if extension.lower() != NO_EXTENSION
        for file_name in file_names
    ]
    if not includes:
        return None

    return (
        f"(Get-ChildItem -Path {format_windows_path(path)} -Recurse "
        f"-ErrorAction SilentlyContinue -Include {','.join(includes)}).fullname"
    )
