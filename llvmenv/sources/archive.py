"""
Archive and local-directory source handlers.
"""

import logging
from pathlib import Path
from typing import Optional

from llvmenv.config.entry import ArchiveSource, LocalSource
from llvmenv.core.download import DownloadError, download_file
from llvmenv.core.filesystem import FilesystemError, extract_source_archive
from llvmenv.core.process import CommandResult, ProcessRunner
from llvmenv.sources.base import SourceError, SourceHandler

logger = logging.getLogger(__name__)


class ArchiveHandler(SourceHandler):
    """
    Downloads a source archive into the download cache and extracts it.

    Archives are immutable releases, so update is a no-op.
    """

    def __init__(self, runner: ProcessRunner, download_dir: Path):
        super().__init__(runner)
        self.download_dir = Path(download_dir)

    def checkout(self, source: ArchiveSource, destination: Path) -> None:
        if not source.filename:
            raise SourceError(f"Cannot derive a file name from {source.url}")

        archive = self.download_dir / source.filename
        try:
            download_file(source.url, archive, expected_sha256=source.sha256)
            logger.info(f"Extracting {archive.name} into {destination}")
            extract_source_archive(archive, destination)
        except (DownloadError, FilesystemError) as e:
            raise SourceError(str(e)) from e
        return None

    def update(self, source: ArchiveSource, destination: Path) -> None:
        logger.info(f"{source.url} is a release archive; nothing to update")
        return None


class LocalHandler(SourceHandler):
    """Uses an existing directory in place; nothing is copied or updated."""

    def checkout(self, source: LocalSource, destination: Path) -> Optional[CommandResult]:
        if not source.path.is_dir():
            raise SourceError(f"Local source directory does not exist: {source.path}")
        logger.debug(f"Using local source {source.path}")
        return None

    def update(self, source: LocalSource, destination: Path) -> None:
        logger.info(f"{source.path} is a local source; update it yourself")
        return None
