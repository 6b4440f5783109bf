"""
CMake build backend.
"""

import logging
from pathlib import Path
from typing import List

from llvmenv.backends.base import BuildBackend
from llvmenv.config.entry import BuildOptions
from llvmenv.core.process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)


class CMakeBackend(BuildBackend):
    """
    CMake build backend implementation.

    Uses the generator-agnostic `cmake --build` and `cmake --install`
    drivers, so the same commands work for Ninja, Makefiles and IDE
    generators.
    """

    def __init__(self, runner: ProcessRunner, cmake: str = "cmake"):
        super().__init__(runner)
        self.cmake = cmake

    def configure_args(
        self,
        source_dir: Path,
        build_dir: Path,
        prefix: Path,
        options: BuildOptions,
    ) -> List[str]:
        """Build the configure command line."""
        args = [self.cmake, "-S", str(source_dir), "-B", str(build_dir)]

        if options.cmake_generator:
            args.extend(["-G", options.cmake_generator])

        args.append(f"-DCMAKE_INSTALL_PREFIX={prefix}")
        args.append(f"-DCMAKE_BUILD_TYPE={options.build_type}")

        if options.targets:
            args.append(f"-DLLVM_TARGETS_TO_BUILD={';'.join(options.targets)}")

        for key, value in options.options:
            args.append(f"-D{key}={value}")

        # Verbatim, last, so they can override anything above
        args.extend(options.cmake_args)
        return args

    def configure(
        self,
        source_dir: Path,
        build_dir: Path,
        prefix: Path,
        options: BuildOptions,
    ) -> CommandResult:
        """Run CMake configuration."""
        build_dir.mkdir(parents=True, exist_ok=True)
        args = self.configure_args(source_dir, build_dir, prefix, options)

        logger.info("Running CMake configuration")
        logger.debug(f"CMake command: {' '.join(args)}")
        return self.runner.run(args, cwd=build_dir)

    def compile(self, build_dir: Path, jobs: int) -> CommandResult:
        """Run `cmake --build` with the requested parallelism."""
        args = [self.cmake, "--build", str(build_dir), "--parallel", str(jobs)]

        logger.info(f"Compiling with {jobs} job(s)")
        logger.debug(f"CMake command: {' '.join(args)}")
        return self.runner.run(args, cwd=build_dir)

    def install(self, build_dir: Path, prefix: Path) -> CommandResult:
        """Run `cmake --install` into the prefix."""
        args = [self.cmake, "--install", str(build_dir), "--prefix", str(prefix)]

        logger.info(f"Installing into {prefix}")
        logger.debug(f"CMake command: {' '.join(args)}")
        return self.runner.run(args, cwd=build_dir)
