"""Configuration module for llvmenv.

This module provides the entry data model and the YAML entries loader.
"""

from llvmenv.config.entry import (
    ArchiveSource,
    BuildOptions,
    Entry,
    GitSource,
    LocalSource,
    SvnSource,
    Tool,
    validate_name,
)
from llvmenv.config.store import ConfigStore, parse_entries

__all__ = [
    "ArchiveSource",
    "BuildOptions",
    "Entry",
    "GitSource",
    "LocalSource",
    "SvnSource",
    "Tool",
    "validate_name",
    "ConfigStore",
    "parse_entries",
]
