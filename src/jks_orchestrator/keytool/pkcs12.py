"""PKCS12 container inspection using cryptography."""

from cryptography.hazmat.primitives.serialization import pkcs12

from jks_orchestrator.core.errors import JKSError

# keytool names unnamed PKCS12 key entries "1"
DEFAULT_PKCS12_ALIAS = "1"


def get_source_alias(pfx_bytes: bytes, password: str) -> str:
    """
    Find the alias of the key-bearing entry in a PKCS12 container.

    Args:
        pfx_bytes: DER-encoded PKCS12 container
        password: Container password

    Returns:
        Friendly name of the certificate paired with the private key

    Raises:
        JKSError: If the container cannot be opened or holds no key
    """
    try:
        container = pkcs12.load_pkcs12(pfx_bytes, password.encode("utf-8"))
    except ValueError as e:
        raise JKSError("Unable to open the PKCS12 certificate with the supplied password.") from e

    if container.key is None or container.cert is None:
        raise JKSError("The PKCS12 certificate does not contain a private key entry.")

    friendly_name = container.cert.friendly_name
    return friendly_name.decode("utf-8") if friendly_name else DEFAULT_PKCS12_ALIAS
