"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands: locating
the root directory and entries file from parsed arguments, constructing the
core components, and reporting errors with consistent exit codes.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from llvmenv.build.registry import BuildRegistry
from llvmenv.build.resolver import CurrentResolver
from llvmenv.config.store import ConfigStore
from llvmenv.core.directory import resolve_config_file, resolve_root_dir
from llvmenv.core.exceptions import (
    LLVMEnvError,
    NoActiveBuildError,
    UnknownBuildError,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_UNKNOWN_BUILD = 3
EXIT_NO_ACTIVE_BUILD = 4


# ============================================================================
# Component Construction
# ============================================================================


def get_root(args) -> Path:
    """Root directory from --root, $LLVMENV_ROOT or the default."""
    return resolve_root_dir(getattr(args, "root", None))


def get_config_store(args) -> ConfigStore:
    """ConfigStore for --config, $LLVMENV_CONFIG or <root>/entries.yaml."""
    root = get_root(args)
    config_file = resolve_config_file(root, getattr(args, "config", None))
    return ConfigStore(config_file, root)


def get_resolver(args) -> CurrentResolver:
    root = get_root(args)
    return CurrentResolver(root, BuildRegistry(root))


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def exit_code_for(error: LLVMEnvError) -> int:
    """
    Map an llvmenv error to a process exit status.

    Unknown builds and a missing active build get dedicated codes so shell
    integrations can tell them apart from pipeline failures.
    """
    if isinstance(error, UnknownBuildError):
        return EXIT_UNKNOWN_BUILD
    if isinstance(error, NoActiveBuildError):
        return EXIT_NO_ACTIVE_BUILD
    return EXIT_FAILURE


def report_error(error: LLVMEnvError) -> int:
    """Log and print an llvmenv error, returning its exit code."""
    logger.debug(f"{type(error).__name__}: {error}")
    print_error(str(error))
    return exit_code_for(error)
