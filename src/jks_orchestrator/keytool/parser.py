"""
keytool output parsing.

keytool has no structured output. These functions read its text
protocol through a handful of literal sentinels; any change to those
literals makes the parsers return empty results rather than fail.
"""

import json

from pydantic import ValidationError

from jks_orchestrator.core.errors import RemoteCommandError
from jks_orchestrator.models.keystore import PrerunResult

ALIAS_DELIM = "Alias name: "
BEG_DELIM = "-----BEGIN CERTIFICATE-----"
END_DELIM = "-----END CERTIFICATE-----"
NOT_EXIST = "not exist"
ENTRY_TYPE_DELIM = "Entry type: "
PRIVATE_KEY_ENTRY = "PrivateKeyEntry"


def parse_aliases(result: str) -> list[str]:
    """
    Read alias names from ``keytool -list -v`` output.

    Args:
        result: Raw command output

    Returns:
        Aliases in listing order; empty when no alias delimiter is present
    """
    result = result.replace("\r", "")
    alias_idx = result.find(ALIAS_DELIM)
    if alias_idx == -1:
        return []

    aliases = []
    for segment in result[alias_idx:].split(ALIAS_DELIM):
        if not segment:
            continue
        newline_idx = segment.find("\n")
        aliases.append(segment if newline_idx == -1 else segment[:newline_idx])
    return aliases


def get_chain_length(certificates: str) -> int:
    """Count BEGIN delimiters."""
    return certificates.count(BEG_DELIM)


def parse_certificate_chain(result: str) -> list[str]:
    """
    Slice PEM blocks out of ``keytool -list -rfc`` output.

    Args:
        result: Raw command output

    Returns:
        PEM certificates in document order (leaf first); empty when no
        BEGIN delimiter is present
    """
    if BEG_DELIM not in result:
        return []

    chain = []
    for _ in range(get_chain_length(result)):
        begin = result.find(BEG_DELIM)
        end = result.find(END_DELIM, begin)
        if begin == -1 or end == -1:
            break
        end += len(END_DELIM)
        chain.append(result[begin:end])
        result = result[end:]
    return chain


def parse_entry_type(result: str) -> str | None:
    """Return the ``Entry type:`` value of the first entry, if listed."""
    idx = result.find(ENTRY_TYPE_DELIM)
    if idx == -1:
        return None
    value = result[idx + len(ENTRY_TYPE_DELIM):].replace("\r", "")
    return value.split("\n", 1)[0].strip()


def is_private_key_entry(result: str) -> bool:
    return parse_entry_type(result) == PRIVATE_KEY_ENTRY


def parse_alias_exists(result: str) -> bool:
    """Any successful listing without "not exist" means the alias exists."""
    return NOT_EXIST not in result


def is_valid_store_listing(result: str) -> bool:
    """A genuine keystore lists at least one alias."""
    return ALIAS_DELIM in result


def split_lines(result: str, separator: str = "\n") -> list[str]:
    """Split command output into non-empty lines."""
    return [line for line in result.split(separator) if line.strip()]


def parse_prerun_result(result: str, expect_discovered: bool) -> PrerunResult:
    """
    Decode the pre-run script's JSON envelope.

    Args:
        result: Raw script output, one JSON object
        expect_discovered: Whether discovered files were requested

    Returns:
        Resolved keytool path and, when requested and present, the
        discovered store files

    Raises:
        RemoteCommandError: If the output is not the expected JSON object
    """
    try:
        envelope = json.loads(result)
    except json.JSONDecodeError as e:
        raise RemoteCommandError(f"Unexpected pre-run script output: {result.strip()}") from e

    if not isinstance(envelope, dict):
        raise RemoteCommandError(f"Unexpected pre-run script output: {result.strip()}")

    discovered = envelope.get("DiscoveredFiles")
    if not expect_discovered or not isinstance(discovered, list):
        envelope = {**envelope, "DiscoveredFiles": None}

    try:
        return PrerunResult.model_validate(envelope)
    except ValidationError as e:
        raise RemoteCommandError("Invalid pre-run script result.") from e
