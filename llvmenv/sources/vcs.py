"""
Git and Subversion source handlers.
"""

import logging
from pathlib import Path

from llvmenv.config.entry import GitSource, SvnSource
from llvmenv.core.process import CommandResult
from llvmenv.sources.base import SourceHandler

logger = logging.getLogger(__name__)


class GitHandler(SourceHandler):
    """Clones with `git clone`, updates with `git pull`."""

    def checkout(self, source: GitSource, destination: Path) -> CommandResult:
        destination.parent.mkdir(parents=True, exist_ok=True)

        args = ["git", "clone"]
        if source.branch:
            args.extend(["-b", source.branch])
        args.extend([source.url, str(destination)])

        logger.info(f"Cloning {source.url} into {destination}")
        return self.runner.run(args, cwd=destination.parent)

    def update(self, source: GitSource, destination: Path) -> CommandResult:
        args = ["git", "pull"]
        if source.branch:
            args.extend(["origin", source.branch])

        logger.info(f"Pulling {source.url} in {destination}")
        return self.runner.run(args, cwd=destination)


class SvnHandler(SourceHandler):
    """Checks out with `svn checkout`, updates with `svn update`."""

    def checkout(self, source: SvnSource, destination: Path) -> CommandResult:
        destination.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Checking out {source.url} into {destination}")
        return self.runner.run(
            ["svn", "checkout", source.url, str(destination)],
            cwd=destination.parent,
        )

    def update(self, source: SvnSource, destination: Path) -> CommandResult:
        logger.info(f"Updating {source.url} in {destination}")
        return self.runner.run(["svn", "update"], cwd=destination)
