"""
Keystore discovery.

Expands search roots, extensions and file name patterns into one remote
search per host (Unix) or per root (Windows), then filters the raw paths:
- ignore-list prefixes are dropped
- on Unix, only files keytool can list an alias from are kept
"""

from dataclasses import dataclass, field

from jks_orchestrator.core.errors import JKSError
from jks_orchestrator.core.logging import logger
from jks_orchestrator.keytool import commands, parser
from jks_orchestrator.services.jks_store import JKSStore


@dataclass
class DiscoveryRequest:
    """
    What to search for.

    Attributes:
        paths: Search roots; ``fullscan`` as first root scans every fixed
            disk (Windows)
        extensions: Extensions without dot; ``noext`` matches names
            without an extension
        file_names: Name patterns, ``*`` when none are given
        ignored_dirs: Path prefixes removed from the results
    """

    paths: list[str]
    extensions: list[str]
    file_names: list[str] = field(default_factory=lambda: ["*"])
    ignored_dirs: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.paths:
            raise JKSError("Blank or missing search directories for Discovery.")
        if not self.extensions:
            raise JKSError("Blank or missing search extensions for Discovery.")
        if not self.file_names:
            self.file_names = ["*"]


def filter_ignored(locations: list[str], ignored_dirs: list[str]) -> list[str]:
    """Drop every location that starts with an ignored prefix."""
    return [
        location
        for location in locations
        if not any(location.startswith(ignored) for ignored in ignored_dirs)
    ]


class DiscoveryEngine:
    """Finds keystore files on the host a JKSStore is connected to."""

    def __init__(self, store: JKSStore):
        self.store = store

    def discover(self, request: DiscoveryRequest) -> list[str]:
        """
        Run the search and apply the post-filters.

        Args:
            request: Search roots, extensions, patterns and ignore-list

        Returns:
            Store paths in the order the remote search produced them
        """
        locations = filter_ignored(
            self.find_stores(request.paths, request.extensions, request.file_names),
            request.ignored_dirs,
        )

        if self.store.is_linux:
            locations = [location for location in locations if self.store.is_valid_store(location)]

        logger.info(f"Discovered {len(locations)} keystore(s) on {self.store.server}")
        return locations

    def find_stores(
        self, paths: list[str], extensions: list[str], file_names: list[str]
    ) -> list[str]:
        """Return the pre-run script's results when present, else search."""
        if self.store.discovered_stores is not None:
            return list(self.store.discovered_stores)

        if self.store.is_linux:
            return self._find_stores_linux(paths, extensions, file_names)
        return self._find_stores_windows(paths, extensions, file_names)

    def _find_stores_linux(
        self, paths: list[str], extensions: list[str], file_names: list[str]
    ) -> list[str]:
        try:
            command = commands.find_stores_linux_command(paths, extensions, file_names)
            if command is None:
                return []

            remote = self.store.require_remote()
            result = remote.run_command(command, with_sudo=self.store.use_sudo)
            return parser.split_lines(result, "\n")
        except JKSError as e:
            raise JKSError(
                f"Error attempting to find certificate stores for path={' '.join(paths)}."
            ) from e

    def _find_stores_windows(
        self, paths: list[str], extensions: list[str], file_names: list[str]
    ) -> list[str]:
        if paths[0].lower() == commands.FULL_SCAN:
            paths = self.store.get_available_paths()

        remote = self.store.require_remote()
        results: list[str] = []
        for path in paths:
            command = commands.find_stores_windows_command(path, extensions, file_names)
            if command is None:
                continue
            result = remote.run_command(command)
            results.extend(line.strip() for line in parser.split_lines(result, "\r\n"))
        return results
