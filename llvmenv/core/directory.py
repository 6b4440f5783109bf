"""
Directory layout for llvmenv.

This module resolves the root data directory and the entries file location.
The root is passed explicitly to every component; nothing below reads it
from ambient state except the resolution functions here.

Directory Structure:
    Root (~/.llvmenv/ or %USERPROFILE%\\.llvmenv\\, or $LLVMENV_ROOT):
        - <name>/         : Install prefix of each build
        - default-build   : Global default build name
        - entries.yaml    : Declared entries
        - .src/<name>/    : Checked-out sources of remote entries
        - .build/<name>/  : CMake build directories
        - .downloads/     : Downloaded source archives

    Any directory:
        - .llvmenv        : Local override naming the active build
"""

import os
from pathlib import Path
from typing import Optional, Union

ROOT_ENV_VAR = "LLVMENV_ROOT"
CONFIG_ENV_VAR = "LLVMENV_CONFIG"

ENTRIES_FILE_NAME = "entries.yaml"
GLOBAL_MARKER_NAME = "default-build"
LOCAL_MARKER_NAME = ".llvmenv"

SOURCE_DIR_NAME = ".src"
BUILD_DIR_NAME = ".build"
DOWNLOAD_DIR_NAME = ".downloads"


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_default_root_dir() -> Path:
    """
    Get the platform-specific default root directory.

    Returns:
        Path: The default root directory path.
            - Windows: %USERPROFILE%\\.llvmenv
            - Linux/macOS: ~/.llvmenv
    """
    if os.name == "nt":  # Windows
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine llvmenv root directory."
            )
        return Path(user_profile) / ".llvmenv"
    else:  # Linux/macOS
        return Path.home() / ".llvmenv"


def resolve_root_dir(explicit: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve the root data directory.

    Precedence: explicit argument, then $LLVMENV_ROOT, then the platform
    default.

    Args:
        explicit: Root directory given on the command line, if any

    Returns:
        Absolute root directory path (not necessarily existing)

    Example:
        >>> resolve_root_dir("/opt/llvmenv")
        PosixPath('/opt/llvmenv')
    """
    if explicit:
        root = Path(explicit)
    elif os.environ.get(ROOT_ENV_VAR):
        root = Path(os.environ[ROOT_ENV_VAR])
    else:
        root = get_default_root_dir()
    return root.expanduser().absolute()


def resolve_config_file(
    root: Path, explicit: Optional[Union[str, Path]] = None
) -> Path:
    """
    Resolve the entries file path.

    Precedence: explicit argument, then $LLVMENV_CONFIG, then
    <root>/entries.yaml.
    """
    if explicit:
        config_file = Path(explicit)
    elif os.environ.get(CONFIG_ENV_VAR):
        config_file = Path(os.environ[CONFIG_ENV_VAR])
    else:
        config_file = root / ENTRIES_FILE_NAME
    return config_file.expanduser().absolute()


def get_global_marker(root: Path) -> Path:
    """Path of the global default-build marker under the root."""
    return root / GLOBAL_MARKER_NAME


def get_local_marker(directory: Path) -> Path:
    """Path of the local override marker inside a directory."""
    return directory / LOCAL_MARKER_NAME


def get_prefix_dir(root: Path, name: str) -> Path:
    """Install prefix of the build named `name`."""
    return root / name


def get_source_root(root: Path) -> Path:
    return root / SOURCE_DIR_NAME


def get_build_root(root: Path) -> Path:
    return root / BUILD_DIR_NAME


def get_download_dir(root: Path) -> Path:
    return root / DOWNLOAD_DIR_NAME
