"""
Build pipeline for llvmenv entries.

The pipeline for one entry is checkout → (optional) fetch → build, where
build is configure → compile → install. Every stage is a separate method a
caller may invoke on its own, and every stage is safe to re-run:

- checkout does nothing when the source directory already exists;
- fetch updates an existing checkout in place;
- build reuses the build directory and relies on the build tool's own
  incremental rebuild.

A failing external tool stops the remaining stages of that entry and
surfaces as CheckoutFailed, FetchFailed or BuildFailed carrying the stage,
the tool and its exit status. Nothing is rolled back and nothing is retried.
"""

import logging
from pathlib import Path
from typing import Optional

from llvmenv.backends.base import BuildBackend
from llvmenv.backends.cmake import CMakeBackend
from llvmenv.build.registry import Build, write_completion_stamp
from llvmenv.config.entry import Entry, validate_name
from llvmenv.core.directory import (
    get_build_root,
    get_download_dir,
    get_prefix_dir,
    get_source_root,
)
from llvmenv.core.exceptions import (
    BuildFailed,
    CheckoutFailed,
    ConfigError,
    FetchFailed,
)
from llvmenv.core.filesystem import safe_rmtree
from llvmenv.core.process import (
    CommandResult,
    ProcessRunner,
    SubprocessRunner,
    available_cpu_count,
)
from llvmenv.sources import SourceError, SourceHandler, get_handler

logger = logging.getLogger(__name__)


class BuildExecutor:
    """
    Runs the checkout/fetch/build stages for entries.

    Attributes:
        root: Root data directory
        runner: Process runner for VCS and build tools
        backend: Build backend (CMake by default)
    """

    def __init__(
        self,
        root: Path,
        runner: Optional[ProcessRunner] = None,
        backend: Optional[BuildBackend] = None,
    ):
        self.root = Path(root)
        self.runner = runner or SubprocessRunner()
        self.backend = backend or CMakeBackend(self.runner)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def source_dir(self, entry: Entry) -> Path:
        """Checked-out source tree (the declared path for local entries)."""
        if entry.is_local:
            return entry.source.path
        return get_source_root(self.root) / entry.name

    def configure_source_dir(self, entry: Entry) -> Path:
        """Directory holding the top-level CMakeLists.txt."""
        source_dir = self.source_dir(entry)
        if entry.build.source_subdir:
            return source_dir / entry.build.source_subdir
        return source_dir

    def build_dir(self, entry: Entry) -> Path:
        return get_build_root(self.root) / entry.name

    def prefix(self, entry: Entry) -> Path:
        return get_prefix_dir(self.root, entry.name)

    def _handler(self, kind: str) -> SourceHandler:
        return get_handler(kind, self.runner, get_download_dir(self.root))

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def checkout(self, entry: Entry) -> bool:
        """
        Bring the entry's source tree into existence.

        Does nothing for a source directory that already exists, so local
        modifications are never discarded. Declared tools whose directory is
        missing are still checked out.

        Returns:
            True if anything was checked out

        Raises:
            CheckoutFailed: If the VCS tool fails, a download fails or a
                local source directory does not exist
        """
        source_dir = self.source_dir(entry)
        changed = False

        if entry.is_local:
            self._checkout_one(entry.name, entry.source, source_dir)
        elif not source_dir.exists():
            self._checkout_one(entry.name, entry.source, source_dir)
            changed = True
        else:
            logger.debug(f"Source for '{entry.name}' already exists at {source_dir}")

        for tool in entry.tools:
            tool_dir = source_dir / tool.path
            if tool_dir.exists():
                logger.debug(f"Tool '{tool.name}' already exists at {tool_dir}")
                continue
            self._checkout_one(entry.name, tool.source, tool_dir)
            changed = True

        return changed

    def fetch(self, entry: Entry) -> None:
        """
        Update an existing checkout against its declared remote.

        Raises:
            CheckoutFailed: If the source has never been checked out
            FetchFailed: If the VCS tool fails
        """
        source_dir = self.source_dir(entry)
        if not source_dir.is_dir():
            raise CheckoutFailed(
                entry.name, detail=f"source directory {source_dir} does not exist"
            )

        self._fetch_one(entry.name, entry.source, source_dir)
        for tool in entry.tools:
            tool_dir = source_dir / tool.path
            if not tool_dir.is_dir():
                raise CheckoutFailed(
                    entry.name, detail=f"tool directory {tool_dir} does not exist"
                )
            self._fetch_one(entry.name, tool.source, tool_dir)

    def build(
        self, entry: Entry, nproc: Optional[int] = None, clean: bool = False
    ) -> Build:
        """
        Configure, compile and install the entry into its prefix.

        Args:
            entry: Entry to build
            nproc: Parallel compile jobs (default: available processing units)
            clean: Remove the build directory before configuring

        Returns:
            The installed build

        Raises:
            BuildFailed: If configure, compile or install exits non-zero
            ConfigError: If the entry name cannot name a build prefix
            ValueError: If nproc is not positive
        """
        problem = validate_name(entry.name)
        if problem:
            raise ConfigError(f"Cannot build entry: {problem}")

        jobs = nproc if nproc is not None else available_cpu_count()
        if jobs < 1:
            raise ValueError(f"nproc must be at least 1, got {jobs}")

        source_dir = self.configure_source_dir(entry)
        build_dir = self.build_dir(entry)
        prefix = self.prefix(entry)

        if clean and build_dir.exists():
            logger.info(f"Removing build directory {build_dir}")
            safe_rmtree(build_dir, require_prefix=self.root)

        build_dir.mkdir(parents=True, exist_ok=True)

        build = Build(name=entry.name, prefix=prefix)
        # Stale once this run starts touching the prefix
        build.stamp_file.unlink(missing_ok=True)

        logger.info(f"Building '{entry.name}' from {source_dir}")
        configured = self.backend.configure(source_dir, build_dir, prefix, entry.build)
        self._check_stage(entry, "configure", configured)
        self._check_stage(entry, "compile", self.backend.compile(build_dir, jobs))
        self._check_stage(entry, "install", self.backend.install(build_dir, prefix))

        prefix.mkdir(parents=True, exist_ok=True)
        write_completion_stamp(build, jobs)
        logger.info(f"Installed '{entry.name}' into {prefix}")
        return build

    def run(
        self,
        entry: Entry,
        update: bool = False,
        nproc: Optional[int] = None,
        clean: bool = False,
    ) -> Build:
        """Run checkout, fetch (when `update`) and build in order."""
        self.checkout(entry)
        if update:
            self.fetch(entry)
        return self.build(entry, nproc=nproc, clean=clean)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _checkout_one(self, entry_name: str, source, destination: Path):
        try:
            result = self._handler(source.kind).checkout(source, destination)
        except SourceError as e:
            raise CheckoutFailed(entry_name, detail=str(e)) from e

        if result is not None and not result.ok:
            raise CheckoutFailed(
                entry_name, result.returncode, result.args, _tail(result)
            )
        return result

    def _fetch_one(self, entry_name: str, source, destination: Path) -> None:
        try:
            result = self._handler(source.kind).update(source, destination)
        except SourceError as e:
            raise FetchFailed(entry_name, detail=str(e)) from e

        if result is not None and not result.ok:
            raise FetchFailed(entry_name, result.returncode, result.args, _tail(result))

    def _check_stage(self, entry: Entry, stage: str, result: CommandResult) -> None:
        if not result.ok:
            logger.error(f"{stage} of '{entry.name}' failed with status {result.returncode}")
            raise BuildFailed(
                entry.name, result.returncode, result.args, _tail(result), stage=stage
            )


def _tail(result: CommandResult, lines: int = 5) -> Optional[str]:
    """Last lines of captured stderr, for error messages."""
    text = (result.stderr or "").strip()
    if not text:
        return None
    return " | ".join(text.splitlines()[-lines:])
