"""Entry data model for llvmenv.

An Entry is a declared, named build source plus its build options. Entries
are immutable once loaded; ConfigStore creates them, BuildExecutor consumes
them.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple, Union

from llvmenv.core.directory import ENTRIES_FILE_NAME, GLOBAL_MARKER_NAME

BUILD_TYPES = ("Debug", "Release", "RelWithDebInfo", "MinSizeRel")

# Config spelling -> CMake generator name
GENERATORS = {
    "ninja": "Ninja",
    "makefile": "Unix Makefiles",
    "visual-studio": "Visual Studio 17 2022",
    "xcode": "Xcode",
}

_NAME_FORBIDDEN = re.compile(r"[\s/\\\x00]")

# Files that live directly under the root next to the build prefixes
RESERVED_NAMES = (GLOBAL_MARKER_NAME, ENTRIES_FILE_NAME)


def validate_name(name) -> Optional[str]:
    """
    Check that a string can name an entry or build.

    Names become directory names directly under the root, so they must be a
    single non-hidden path component.

    Returns:
        None if the name is valid, otherwise a description of the problem
    """
    if not isinstance(name, str) or not name:
        return "name must be a non-empty string"
    if name in (".", ".."):
        return f"'{name}' is not a valid name"
    if name.startswith("."):
        return f"name '{name}' must not start with '.'"
    if name in RESERVED_NAMES:
        return f"name '{name}' is reserved for llvmenv's own files"
    if _NAME_FORBIDDEN.search(name):
        return f"name '{name}' must not contain whitespace or path separators"
    return None


@dataclass(frozen=True)
class GitSource:
    """Remote Git repository, optionally pinned to a branch or tag."""

    url: str
    branch: Optional[str] = None

    kind = "git"


@dataclass(frozen=True)
class SvnSource:
    """Remote Subversion repository."""

    url: str

    kind = "svn"


@dataclass(frozen=True)
class ArchiveSource:
    """Source archive (tar.xz, tar.gz, zip...) fetched over HTTP(S)."""

    url: str
    sha256: Optional[str] = None

    kind = "archive"

    @property
    def filename(self) -> str:
        return self.url.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]


@dataclass(frozen=True)
class LocalSource:
    """Existing source tree on this machine, used in place."""

    path: Path

    kind = "local"


Source = Union[GitSource, SvnSource, ArchiveSource, LocalSource]


@dataclass(frozen=True)
class Tool:
    """
    Additional repository checked out inside an entry's source tree.

    Older LLVM layouts keep clang and friends in separate repositories that
    must live under llvm/tools/ before configuring.
    """

    name: str
    source: Union[GitSource, SvnSource]
    relative_path: Optional[str] = None

    @property
    def path(self) -> str:
        return self.relative_path or f"tools/{self.name}"


@dataclass(frozen=True)
class BuildOptions:
    """
    Options passed to the configure step.

    Attributes:
        cmake_args: Extra configure arguments, passed through verbatim
        targets: Target subset (LLVM_TARGETS_TO_BUILD); empty means all
        build_type: CMAKE_BUILD_TYPE
        generator: Config spelling of the CMake generator (see GENERATORS)
        options: -DKEY=VALUE definitions, in declaration order
        source_subdir: Directory of the top-level CMakeLists.txt within the
            source tree (e.g. "llvm" for the monorepo)
    """

    cmake_args: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()
    build_type: str = "Release"
    generator: Optional[str] = None
    options: Tuple[Tuple[str, str], ...] = ()
    source_subdir: Optional[str] = None

    @property
    def cmake_generator(self) -> Optional[str]:
        if self.generator is None:
            return None
        return GENERATORS[self.generator]


@dataclass(frozen=True)
class Entry:
    """A declared, buildable source."""

    name: str
    source: Source
    build: BuildOptions = field(default_factory=BuildOptions)
    tools: Tuple[Tool, ...] = ()

    @property
    def is_local(self) -> bool:
        return isinstance(self.source, LocalSource)

    def describe(self) -> str:
        """One-line human readable description of the source."""
        if self.is_local:
            return f"local {self.source.path}"
        if isinstance(self.source, GitSource) and self.source.branch:
            return f"git {self.source.url} ({self.source.branch})"
        return f"{self.source.kind} {self.source.url}"

