"""Tests for keytool and search command builders."""

from jks_orchestrator.keytool import commands


def test_store_password_flag_is_quoted():
    assert commands.format_store_password("changeit") == "-storepass 'changeit'"


def test_empty_store_password_omits_flag():
    command = commands.list_aliases_command("", "/opt/certs/app.jks", "")

    assert command == "keytool -list -v -keystore '/opt/certs/app.jks'"
    assert "storepass" not in commands.list_aliases_command("", "/a.jks", None)


def test_list_and_chain_commands():
    assert (
        commands.list_aliases_command("/usr/bin/", "/opt/app.jks", "pw")
        == "/usr/bin/keytool -list -v -keystore '/opt/app.jks' -storepass 'pw'"
    )
    assert (
        commands.certificate_chain_command("", "/opt/app.jks", "pw", "web01")
        == "keytool -list -rfc -keystore '/opt/app.jks' -storepass 'pw' -alias 'web01'"
    )


def test_delete_and_alias_exists_commands():
    assert (
        commands.delete_alias_command("", "/opt/app.jks", "stale", "pw")
        == "keytool -delete -alias 'stale' -keystore '/opt/app.jks' -storepass 'pw'"
    )
    assert (
        commands.alias_exists_command("", "/opt/app.jks", "web01", "pw")
        == "keytool -list -keystore '/opt/app.jks' -alias 'web01' -storepass 'pw'"
    )


def test_create_store_command_uses_placeholder_keypair():
    command = commands.create_store_command("", "/opt/new.jks", "pw")

    assert command.startswith("keytool -genkeypair -keystore '/opt/new.jks' -storepass 'pw'")
    assert '-dname "cn=New Certificate Store"' in command
    assert "-keyalg RSA" in command
    assert '-validity 1 -alias "NewCertStore"' in command


def test_import_certificate_command():
    command = commands.import_certificate_command(
        "", "/opt/app.jks", "web01", "/tmp/abc.pem", "pw"
    )

    assert command == (
        "keytool -import -alias 'web01' -keystore '/opt/app.jks' "
        "-file '/tmp/abc.pem' -deststorepass 'pw' -noprompt"
    )


def test_import_pkcs12_command_falls_back_to_store_password_for_entry():
    command = commands.import_pkcs12_command(
        "", "/opt/app.jks", "/tmp/abc.p12", "pfxpw", "1", "web01", "storepw"
    )

    assert "-srckeystore '/tmp/abc.p12' -srcstoretype PKCS12" in command
    assert "-srcstorepass 'pfxpw' -srcalias '1'" in command
    assert "-destalias 'web01' -deststoretype JKS" in command
    assert "-destkeypass 'storepw' -deststorepass 'storepw'" in command


def test_import_pkcs12_command_with_entry_password():
    command = commands.import_pkcs12_command(
        "", "/opt/app.jks", "/tmp/abc.p12", "pfxpw", "1", "web01", "storepw", "entrypw"
    )

    assert "-destkeypass 'entrypw'" in command


def test_staged_file_names_are_unique():
    first = commands.new_staged_file_name(".pem")
    second = commands.new_staged_file_name(".pem")

    assert first.endswith(".pem")
    assert first != second


def test_find_stores_linux_command_crosses_patterns_and_extensions():
    command = commands.find_stores_linux_command(["/opt", "/home"], ["jks", "noext"], ["*"])

    assert command == "find /opt /home -iname '*.jks' -or -iname '*' ! -iname '*.*'"


def test_find_stores_linux_command_only_noext_returns_none():
    assert commands.find_stores_linux_command(["/opt"], ["noext", "NOEXT"], ["*"]) is None


def test_find_stores_windows_command():
    command = commands.find_stores_windows_command("C:", ["jks", "noext"], ["*", "app"])

    assert command == (
        "(Get-ChildItem -Path C:\\ -Recurse -ErrorAction SilentlyContinue "
        "-Include *.jks,app.jks).fullname"
    )


def test_find_stores_windows_command_only_noext_returns_none():
    assert commands.find_stores_windows_command("C:", ["noext"], ["*"]) is None


def test_keytool_installed_command_per_platform():
    assert commands.keytool_installed_command(True) == "which keytool"
    assert commands.keytool_installed_command(False) == "java -version 2>&1"
