"""
Active build resolution.

The active build for a directory is named by the nearest `.llvmenv` marker
found walking from that directory up to the filesystem root. If no marker is
found, the global default `<root>/default-build` applies. Every query walks
the filesystem again, so edits to marker files take effect immediately.

Example:
    >>> registry = BuildRegistry(root)
    >>> resolver = CurrentResolver(root, registry)
    >>> resolver.set_local("llvm-17", Path("~/project").expanduser())
    >>> resolver.seek(Path("~/project/src").expanduser()).resolved_name
    'llvm-17'
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from llvmenv.build.registry import Build, BuildRegistry
from llvmenv.config.entry import validate_name
from llvmenv.core.directory import get_global_marker, get_local_marker
from llvmenv.core.exceptions import (
    DanglingMarkerError,
    InvalidMarkerError,
    NoActiveBuildError,
    UnknownBuildError,
)
from llvmenv.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveBuildPointer:
    """
    Result of resolving the active build.

    Attributes:
        resolved_name: Name of the active build
        source_path: Marker file that produced the resolution
        is_global: True when the global default applied
    """

    resolved_name: str
    source_path: Optional[Path] = None
    is_global: bool = False


class CurrentResolver:
    """Resolves and sets the active build."""

    def __init__(self, root: Path, registry: BuildRegistry):
        self.root = Path(root)
        self.registry = registry

    @property
    def global_marker(self) -> Path:
        return get_global_marker(self.root)

    def seek(self, starting_directory: Optional[Path] = None) -> ActiveBuildPointer:
        """
        Resolve the active build for a directory.

        Args:
            starting_directory: Directory to start from (default: cwd)

        Returns:
            Pointer naming the active build and the marker that set it

        Raises:
            InvalidMarkerError: If the governing marker is malformed
            DanglingMarkerError: If it names a build that is not installed
            NoActiveBuildError: If no local or global marker exists
        """
        start = Path(starting_directory or Path.cwd()).absolute().resolve()

        for directory in (start, *start.parents):
            marker = get_local_marker(directory)
            if marker.is_file():
                logger.debug(f"Found local marker {marker}")
                return self._pointer_from(marker, is_global=False)

        if self.global_marker.is_file():
            logger.debug(f"Using global marker {self.global_marker}")
            return self._pointer_from(self.global_marker, is_global=True)

        raise NoActiveBuildError(start)

    def resolve_build(
        self, starting_directory: Optional[Path] = None
    ) -> Tuple[Build, ActiveBuildPointer]:
        """Resolve the active build and return it with its pointer."""
        pointer = self.seek(starting_directory)
        build = self.registry.find(pointer.resolved_name)
        if build is None:
            # Removed between the marker check and this lookup
            raise DanglingMarkerError(pointer.resolved_name, pointer.source_path)
        return build, pointer

    def set_global(self, name: str) -> Path:
        """
        Make `name` the global default build.

        Raises:
            UnknownBuildError: If no such build is installed; nothing is written
        """
        self._require_build(name)
        atomic_write(self.global_marker, f"{name}\n")
        logger.info(f"Global build set to '{name}'")
        return self.global_marker

    def set_local(self, name: str, directory: Optional[Path] = None) -> Path:
        """
        Make `name` the active build for `directory` and its descendants.

        Args:
            name: Build name
            directory: Directory receiving the marker (default: cwd)

        Raises:
            UnknownBuildError: If no such build is installed; nothing is written
            NotADirectoryError: If `directory` is not an existing directory
        """
        self._require_build(name)
        directory = Path(directory or Path.cwd()).absolute()
        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        marker = get_local_marker(directory)
        atomic_write(marker, f"{name}\n")
        logger.info(f"Local build for {directory} set to '{name}'")
        return marker

    def _require_build(self, name: str) -> Build:
        build = self.registry.find(name)
        if build is None:
            raise UnknownBuildError(name)
        return build

    def _pointer_from(self, marker: Path, is_global: bool) -> ActiveBuildPointer:
        name = read_marker(marker)
        if self.registry.find(name) is None:
            raise DanglingMarkerError(name, marker)
        return ActiveBuildPointer(
            resolved_name=name, source_path=marker, is_global=is_global
        )


def read_marker(marker: Path) -> str:
    """
    Read the single build name stored in a marker file.

    Raises:
        InvalidMarkerError: If the file is unreadable, empty, holds more than
            one token or an invalid name
    """
    try:
        content = marker.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidMarkerError(marker, f"cannot be read: {e}")

    tokens = content.split()
    if not tokens:
        raise InvalidMarkerError(marker, "file is empty")
    if len(tokens) > 1:
        raise InvalidMarkerError(marker, "expected exactly one build name")

    name = tokens[0]
    problem = validate_name(name)
    if problem:
        raise InvalidMarkerError(marker, problem)
    return name
