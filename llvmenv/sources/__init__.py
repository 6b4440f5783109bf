"""
Source handlers for llvmenv.
"""

from pathlib import Path

from llvmenv.core.process import ProcessRunner
from llvmenv.sources.archive import ArchiveHandler, LocalHandler
from llvmenv.sources.base import SourceError, SourceHandler
from llvmenv.sources.vcs import GitHandler, SvnHandler


def get_handler(kind: str, runner: ProcessRunner, download_dir: Path) -> SourceHandler:
    """
    Create the handler for a source kind.

    Args:
        kind: Source kind ('git', 'svn', 'archive', 'local')
        runner: Process runner used for external tools
        download_dir: Cache directory for downloaded archives

    Raises:
        KeyError: If the kind is unknown
    """
    if kind == "git":
        return GitHandler(runner)
    if kind == "svn":
        return SvnHandler(runner)
    if kind == "archive":
        return ArchiveHandler(runner, download_dir)
    if kind == "local":
        return LocalHandler(runner)
    raise KeyError(f"Unknown source kind: {kind}")


__all__ = [
    "ArchiveHandler",
    "GitHandler",
    "LocalHandler",
    "SourceError",
    "SourceHandler",
    "SvnHandler",
    "get_handler",
]
