"""YAML entries configuration for llvmenv.

This module loads and validates the entries file (entries.yaml) and exposes
the root data directory that every other component is constructed with.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from llvmenv.config.entry import (
    BUILD_TYPES,
    GENERATORS,
    ArchiveSource,
    BuildOptions,
    Entry,
    GitSource,
    LocalSource,
    SvnSource,
    Tool,
    validate_name,
)
from llvmenv.core.exceptions import ConfigError, UnknownEntryError
from llvmenv.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1
SOURCE_KEYS = ("git", "svn", "archive", "path")

DEFAULT_ENTRIES = """\
# llvmenv entries
#
# Each entry declares one source to build. Exactly one of `git`, `svn`,
# `archive` or `path` selects where the source comes from.
#
#   llvmenv build-entry NAME [-u] [-j N]
#   llvmenv global NAME
#   llvmenv local NAME
version: 1

entries:
  - name: llvm-main
    git: https://github.com/llvm/llvm-project.git
    branch: main
    build:
      source_subdir: llvm
      generator: ninja
      build_type: Release
      options:
        LLVM_ENABLE_PROJECTS: clang;lld

  - name: llvm-17
    archive: https://github.com/llvm/llvm-project/releases/download/llvmorg-17.0.6/llvm-project-17.0.6.src.tar.xz
    build:
      source_subdir: llvm
      generator: ninja
      targets: [X86, AArch64]
      options:
        LLVM_ENABLE_PROJECTS: clang

#  - name: my-llvm
#    path: ~/src/llvm-project/llvm
#    build:
#      build_type: Debug
#      cmake_args: ["-DLLVM_ENABLE_ASSERTIONS=ON"]
"""


class ConfigStore:
    """
    Loads declared entries and owns the root data directory path.

    Attributes:
        config_file: Path to the entries YAML file
        root: Root data directory
    """

    def __init__(self, config_file: Path, root: Path):
        self.config_file = Path(config_file)
        self.root = Path(root)

    def root_directory(self) -> Path:
        """Base path of all prefixes, scratch directories and the global marker."""
        return self.root

    def load(self) -> List[Entry]:
        """
        Load and validate all entries.

        Returns:
            Entries in file order

        Raises:
            ConfigError: If the file is missing, malformed or declares a
                name twice
        """
        data = self._read()
        return parse_entries(data, base_dir=self.config_file.parent)

    def load_entry(self, name: str) -> Entry:
        """
        Load a single entry by name.

        Raises:
            ConfigError: If the configuration is invalid
            UnknownEntryError: If no entry has that name
        """
        for entry in self.load():
            if entry.name == name:
                return entry
        raise UnknownEntryError(name)

    def init(self, force: bool = False) -> Path:
        """
        Create the root directory and write the default entries file.

        Args:
            force: Overwrite an existing entries file

        Returns:
            Path of the entries file

        Raises:
            ConfigError: If the entries file exists and force is False
        """
        self.root.mkdir(parents=True, exist_ok=True)

        if self.config_file.exists() and not force:
            raise ConfigError(
                f"Configuration already exists: {self.config_file}. "
                "Use --force to overwrite it."
            )

        logger.debug(f"Writing default entries to {self.config_file}")
        atomic_write(self.config_file, DEFAULT_ENTRIES)
        return self.config_file

    def _read(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            raise ConfigError(
                f"Configuration file not found: {self.config_file}. "
                "Run 'llvmenv init' to create one."
            )

        logger.debug(f"Loading entries from {self.config_file}")
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax in {self.config_file}: {e}")

        if data is None:
            raise ConfigError(f"Configuration file is empty: {self.config_file}")

        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping at the top level")

        return data


def parse_entries(data: Dict[str, Any], base_dir: Optional[Path] = None) -> List[Entry]:
    """
    Parse and validate the entries configuration.

    Args:
        data: Parsed YAML document
        base_dir: Directory relative local paths are resolved against

    Returns:
        Entries in declaration order

    Raises:
        ConfigError: If any entry is invalid or a name is declared twice
    """
    version = data.get("version", SUPPORTED_VERSION)
    if version != SUPPORTED_VERSION:
        raise ConfigError(
            f"Unsupported version: {version} (expected {SUPPORTED_VERSION})"
        )

    raw_entries = data.get("entries")
    if raw_entries is None:
        raise ConfigError("Missing required field: entries")
    if not isinstance(raw_entries, list):
        raise ConfigError("entries must be a list")

    entries = []
    names = set()

    for index, entry_data in enumerate(raw_entries):
        entry = _parse_entry(entry_data, index, base_dir)

        if entry.name in names:
            raise ConfigError(f"Duplicate entry name: {entry.name}")

        names.add(entry.name)
        entries.append(entry)

    return entries


def _parse_entry(data: Any, index: int, base_dir: Optional[Path]) -> Entry:
    """Parse one entry mapping."""
    if not isinstance(data, dict):
        raise ConfigError(f"entries[{index}] must be a mapping")

    if "name" not in data:
        raise ConfigError(f"entries[{index}] missing required field: name")

    name = data["name"]
    problem = validate_name(name)
    if problem:
        raise ConfigError(f"entries[{index}]: {problem}")

    source = _parse_source(data, f"entry '{name}'", base_dir, allow_local=True)

    tools = _parse_tools(data.get("tools", []), name)
    if tools and isinstance(source, LocalSource):
        raise ConfigError(
            f"entry '{name}': tools can only be declared for remote sources"
        )

    build = _parse_build_options(data.get("build", {}), name)

    return Entry(name=name, source=source, build=build, tools=tuple(tools))


def _parse_source(
    data: Dict[str, Any], where: str, base_dir: Optional[Path], allow_local: bool
):
    """Parse the source locator of an entry or a tool."""
    allowed = SOURCE_KEYS if allow_local else ("git", "svn")
    present = [key for key in allowed if key in data]

    if len(present) != 1:
        raise ConfigError(
            f"{where} must specify exactly one of: {', '.join(allowed)}"
        )

    kind = present[0]
    locator = data[kind]

    if not isinstance(locator, str) or not locator.strip():
        raise ConfigError(f"{where}: '{kind}' must be a non-empty string")

    if kind == "path":
        return LocalSource(path=_parse_local_path(locator, where, base_dir))

    url = locator.strip()
    if kind == "git":
        branch = data.get("branch")
        if branch is not None and (not isinstance(branch, str) or not branch):
            raise ConfigError(f"{where}: branch must be a non-empty string")
        return GitSource(url=url, branch=branch)
    if kind == "svn":
        return SvnSource(url=url)

    sha256 = data.get("sha256")
    if sha256 is not None and not isinstance(sha256, str):
        raise ConfigError(f"{where}: sha256 must be a string")
    return ArchiveSource(url=url, sha256=sha256)


def _parse_local_path(locator: str, where: str, base_dir: Optional[Path]) -> Path:
    """Syntactic validation only; existence is checked at checkout time."""
    if "\x00" in locator:
        raise ConfigError(f"{where}: path contains a NUL character")

    path = Path(locator).expanduser()
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


def _parse_tools(data: Any, entry_name: str) -> List[Tool]:
    """Parse extra repositories checked out into the source tree."""
    if not isinstance(data, list):
        raise ConfigError(f"entry '{entry_name}': tools must be a list")

    tools = []
    seen = set()
    for tool_data in data:
        if not isinstance(tool_data, dict) or "name" not in tool_data:
            raise ConfigError(
                f"entry '{entry_name}': each tool needs a 'name' field"
            )

        tool_name = tool_data["name"]
        problem = validate_name(tool_name)
        if problem:
            raise ConfigError(f"entry '{entry_name}' tool: {problem}")
        if tool_name in seen:
            raise ConfigError(
                f"entry '{entry_name}': duplicate tool name: {tool_name}"
            )
        seen.add(tool_name)

        where = f"tool '{tool_name}' of entry '{entry_name}'"
        source = _parse_source(tool_data, where, None, allow_local=False)

        relative_path = tool_data.get("relative_path")
        if relative_path is not None:
            if not isinstance(relative_path, str) or not relative_path:
                raise ConfigError(f"{where}: relative_path must be a string")
            if Path(relative_path).is_absolute() or ".." in Path(relative_path).parts:
                raise ConfigError(
                    f"{where}: relative_path must stay inside the source tree"
                )

        tools.append(Tool(name=tool_name, source=source, relative_path=relative_path))

    return tools


def _parse_build_options(data: Any, entry_name: str) -> BuildOptions:
    """Parse the build section of an entry."""
    where = f"entry '{entry_name}'"
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: build must be a mapping")

    build_type = data.get("build_type", "Release")
    if build_type not in BUILD_TYPES:
        raise ConfigError(
            f"{where}: invalid build_type: {build_type} (expected one of {list(BUILD_TYPES)})"
        )

    generator = data.get("generator")
    if generator is not None:
        generator = str(generator).lower()
        if generator not in GENERATORS:
            raise ConfigError(
                f"{where}: invalid generator: {generator} (expected one of {list(GENERATORS)})"
            )

    cmake_args = _string_list(data.get("cmake_args", []), f"{where}: cmake_args")
    targets = _string_list(data.get("targets", []), f"{where}: targets")

    options = data.get("options", {})
    if not isinstance(options, dict):
        raise ConfigError(f"{where}: options must be a mapping")
    option_pairs: Tuple[Tuple[str, str], ...] = tuple(
        (str(key), _option_value(value)) for key, value in options.items()
    )

    source_subdir = data.get("source_subdir")
    if source_subdir is not None and (
        not isinstance(source_subdir, str) or Path(source_subdir).is_absolute()
    ):
        raise ConfigError(f"{where}: source_subdir must be a relative path")

    return BuildOptions(
        cmake_args=tuple(cmake_args),
        targets=tuple(targets),
        build_type=build_type,
        generator=generator,
        options=option_pairs,
        source_subdir=source_subdir,
    )


def _string_list(value: Any, where: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where} must be a list of strings")
    return value


def _option_value(value: Any) -> str:
    # YAML turns ON/OFF into booleans
    if isinstance(value, bool):
        return "ON" if value else "OFF"
    return str(value)
