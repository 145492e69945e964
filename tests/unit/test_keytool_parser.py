"""Tests for keytool output parsing."""

import pytest

from jks_orchestrator.core.errors import RemoteCommandError
from jks_orchestrator.keytool import parser


def test_parse_aliases_returns_every_alias_in_order():
    output = (
        "Keystore type: JKS\n"
        "Your keystore contains 3 entries\n\n"
        "Alias name: web01\nCreation date: Jan 1, 2025\n\n"
        "Alias name: web02\nCreation date: Jan 2, 2025\n\n"
        "Alias name: root ca\nCreation date: Jan 3, 2025\n"
    )

    assert parser.parse_aliases(output) == ["web01", "web02", "root ca"]


def test_parse_aliases_strips_carriage_returns():
    output = "Alias name: web01\r\nEntry type: PrivateKeyEntry\r\n"

    assert parser.parse_aliases(output) == ["web01"]


def test_parse_aliases_without_delimiter_is_empty():
    assert parser.parse_aliases("Your keystore contains 0 entries\n") == []
    assert parser.parse_aliases("") == []


def test_parse_certificate_chain_returns_blocks_in_document_order(
    chain_listing, leaf_pem, issuer_pem
):
    chain = parser.parse_certificate_chain(chain_listing)

    assert chain == [leaf_pem, issuer_pem]
    assert parser.get_chain_length(chain_listing) == 2


def test_parse_certificate_chain_without_certificates_is_empty():
    assert parser.parse_certificate_chain("keytool error: Alias <x> does not exist") == []


def test_parse_certificate_chain_ignores_unterminated_block(leaf_pem):
    output = f"{leaf_pem}\n-----BEGIN CERTIFICATE-----\nMIItruncated"

    assert parser.parse_certificate_chain(output) == [leaf_pem]


def test_private_key_entry_detection(chain_listing):
    assert parser.parse_entry_type(chain_listing) == "PrivateKeyEntry"
    assert parser.is_private_key_entry(chain_listing) is True
    assert parser.is_private_key_entry("Entry type: trustedCertEntry\n") is False
    assert parser.parse_entry_type("no entry type here") is None


@pytest.mark.parametrize(
    "output,expected",
    [
        ("web01, Jan 1, 2025, trustedCertEntry,", True),
        ("keytool error: java.lang.Exception: Alias <web01> does not exist", False),
    ],
)
def test_parse_alias_exists(output, expected):
    assert parser.parse_alias_exists(output) is expected


def test_is_valid_store_listing():
    assert parser.is_valid_store_listing("Alias name: a\n") is True
    assert parser.is_valid_store_listing("keytool error: Invalid keystore format") is False


def test_split_lines_drops_blank_lines():
    assert parser.split_lines("C:\r\n\r\nD:\r\n", "\r\n") == ["C:", "D:"]


def test_parse_prerun_result_with_discovered_files():
    result = parser.parse_prerun_result(
        '{"KeyToolPath": "/usr/lib/jvm/bin/", "DiscoveredFiles": ["/opt/a.jks"]}',
        expect_discovered=True,
    )

    assert result.keytool_path == "/usr/lib/jvm/bin/"
    assert result.discovered_files == ["/opt/a.jks"]


def test_parse_prerun_result_ignores_discovered_files_when_not_requested():
    result = parser.parse_prerun_result(
        '{"KeyToolPath": "/usr/bin/", "DiscoveredFiles": ["/opt/a.jks"]}',
        expect_discovered=False,
    )

    assert result.discovered_files is None


def test_parse_prerun_result_rejects_non_json():
    with pytest.raises(RemoteCommandError, match="Unexpected pre-run script output"):
        parser.parse_prerun_result("bash: java: command not found", expect_discovered=False)
