"""
Builds: enumeration, active-build resolution and the build pipeline.
"""

from llvmenv.build.executor import BuildExecutor
from llvmenv.build.registry import Build, BuildRegistry
from llvmenv.build.resolver import ActiveBuildPointer, CurrentResolver, read_marker

__all__ = [
    "ActiveBuildPointer",
    "Build",
    "BuildExecutor",
    "BuildRegistry",
    "CurrentResolver",
    "read_marker",
]
