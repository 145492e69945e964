"""
Exception hierarchy for remote keystore operations.

Every failure a job can report derives from ``JKSError``. Causes are kept
with ``raise ... from ...`` and flattened into a single message for the
job result by ``flatten_exception_messages``.
"""


class JKSError(Exception):
    """Base error for keystore discovery, inventory and management."""


class ConfigurationError(JKSError):
    """Missing or malformed orchestrator configuration."""


class RemoteConnectionError(JKSError):
    """The remote session could not be established."""


class KeytoolNotFoundError(JKSError):
    """keytool is not reachable on the remote host."""


class RemoteCommandError(JKSError):
    """A remote command failed or reported a keytool error."""


class UploadError(JKSError):
    """A staged file could not be written to the remote host."""


class StoreNotFoundError(JKSError):
    """The keystore file does not exist on the remote host."""


class AliasExistsError(JKSError):
    """The alias is already present and overwrite was not requested."""


class SubmissionError(JKSError):
    """The host callback that ingests job results failed."""


def flatten_exception_messages(exc: BaseException, prefix: str) -> str:
    """Join the messages of an exception and all of its causes.

    Args:
        exc: Outermost exception.
        prefix: Context prepended to the message (server, store path).

    Returns:
        One line suitable for a job failure message.
    """
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc

    while current is not None and id(current) not in seen:
        seen.add(id(current))
        message = str(current).strip()
        if message:
            messages.append(message)
        current = current.__cause__ or current.__context__

    flattened = " - ".join(messages) if messages else type(exc).__name__
    return f"{prefix} {flattened}" if prefix else flattened
