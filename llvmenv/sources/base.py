"""
Source handler interface for llvmenv.

A source handler knows how to bring one kind of source (Git, SVN, archive,
local directory) into a directory, and how to update it afterwards.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from llvmenv.core.process import CommandResult, ProcessRunner


class SourceError(Exception):
    """A checkout or update failed without an external tool exit status."""

    pass


class SourceHandler(ABC):
    """
    Abstract base class for source handlers.

    Handlers that shell out return the CommandResult of the tool they ran and
    leave interpreting the exit status to the caller. Failures that have no
    exit status raise SourceError. Returning None means there was nothing to
    do.
    """

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    @abstractmethod
    def checkout(self, source, destination: Path) -> Optional[CommandResult]:
        """
        Create `destination` from the source.

        Args:
            source: Source descriptor of the kind this handler supports
            destination: Directory to create; must not exist yet
        """
        pass

    @abstractmethod
    def update(self, source, destination: Path) -> Optional[CommandResult]:
        """
        Update an existing checkout in `destination`.

        Args:
            source: Source descriptor of the kind this handler supports
            destination: Directory created by a previous checkout
        """
        pass
