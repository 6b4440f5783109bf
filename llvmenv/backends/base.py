"""
Build backend interface for llvmenv.

This module defines the abstract base class for build backends (e.g. CMake).
"""

from abc import ABC, abstractmethod
from pathlib import Path

from llvmenv.config.entry import BuildOptions
from llvmenv.core.process import CommandResult, ProcessRunner


class BuildBackend(ABC):
    """
    Abstract base class for build backends.

    A build backend configures, compiles and installs a source tree. Each step
    is one external invocation whose CommandResult is returned unchanged; the
    caller decides what a non-zero exit status means.
    """

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    @abstractmethod
    def configure(
        self,
        source_dir: Path,
        build_dir: Path,
        prefix: Path,
        options: BuildOptions,
    ) -> CommandResult:
        """
        Configure the build.

        Args:
            source_dir: Directory holding the top-level build script
            build_dir: Directory where build artifacts should be placed
            prefix: Install prefix
            options: Entry build options
        """
        pass

    @abstractmethod
    def compile(self, build_dir: Path, jobs: int) -> CommandResult:
        """Compile a configured build directory with `jobs` parallel jobs."""
        pass

    @abstractmethod
    def install(self, build_dir: Path, prefix: Path) -> CommandResult:
        """Install a compiled build directory into `prefix`."""
        pass
