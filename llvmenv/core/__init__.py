"""
Core functionality for llvmenv.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    resolve_root_dir,
    resolve_config_file,
    get_global_marker,
    get_local_marker,
    get_prefix_dir,
    DirectoryError,
)

from .process import (
    CommandResult,
    ProcessRunner,
    SubprocessRunner,
    available_cpu_count,
)

from .exceptions import (
    LLVMEnvError,
    ConfigError,
    UnknownEntryError,
    UnknownBuildError,
    DanglingMarkerError,
    InvalidMarkerError,
    NoActiveBuildError,
    PipelineError,
    CheckoutFailed,
    FetchFailed,
    BuildFailed,
)

__all__ = [
    "resolve_root_dir",
    "resolve_config_file",
    "get_global_marker",
    "get_local_marker",
    "get_prefix_dir",
    "DirectoryError",
    "CommandResult",
    "ProcessRunner",
    "SubprocessRunner",
    "available_cpu_count",
    "LLVMEnvError",
    "ConfigError",
    "UnknownEntryError",
    "UnknownBuildError",
    "DanglingMarkerError",
    "InvalidMarkerError",
    "NoActiveBuildError",
    "PipelineError",
    "CheckoutFailed",
    "FetchFailed",
    "BuildFailed",
]
