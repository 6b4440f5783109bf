"""
Installed build enumeration.

A build exists exactly when its prefix directory <root>/<name> exists; there
is no manifest. The registry is read-only and uncached, so it always reflects
builds created or removed out-of-band.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import yaml

from llvmenv.config.entry import validate_name
from llvmenv.core.directory import get_prefix_dir
from llvmenv.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

COMPLETION_STAMP_NAME = ".llvmenv-build.yaml"


@dataclass(frozen=True)
class Build:
    """An installed build on disk."""

    name: str
    prefix: Path

    @property
    def stamp_file(self) -> Path:
        return self.prefix / COMPLETION_STAMP_NAME

    @property
    def is_complete(self) -> bool:
        """True once a pipeline run has finished installing into the prefix."""
        return self.stamp_file.is_file()

    def exists(self) -> bool:
        return self.prefix.is_dir()


def write_completion_stamp(build: Build, jobs: int) -> None:
    """Record that a pipeline run installed into `build.prefix` successfully."""
    stamp = {
        "entry": build.name,
        "completed_at": datetime.now(timezone.utc).isoformat(),
        "jobs": jobs,
    }
    atomic_write(build.stamp_file, yaml.safe_dump(stamp, sort_keys=False))


class BuildRegistry:
    """
    Enumerates installed builds by scanning the root directory.

    Every subdirectory of the root whose name is a valid build name is
    reported as a build, whether or not an entry still declares it. Hidden
    scratch directories and llvmenv's own files never are.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def list_builds(self) -> List[Build]:
        """
        List installed builds, sorted by name.

        Returns:
            Builds for every validly named subdirectory of the root
        """
        if not self.root.is_dir():
            logger.debug(f"Root directory does not exist: {self.root}")
            return []

        builds = []
        for child in sorted(self.root.iterdir(), key=lambda p: p.name):
            if not child.is_dir() or validate_name(child.name) is not None:
                continue
            builds.append(Build(name=child.name, prefix=child))
        return builds

    def find(self, name: str) -> Optional[Build]:
        """
        Look up a build by name.

        Returns:
            The build if its prefix directory exists, otherwise None
        """
        if validate_name(name) is not None:
            return None

        build = Build(name=name, prefix=get_prefix_dir(self.root, name))
        return build if build.exists() else None
