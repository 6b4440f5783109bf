"""
Builds command implementation.

Lists installed builds and their prefixes.
"""

import logging

from llvmenv.build.registry import BuildRegistry
from llvmenv.cli.utils import EXIT_SUCCESS, get_root

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the builds command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    registry = BuildRegistry(get_root(args))
    builds = registry.list_builds()

    if not builds:
        logger.info(f"No builds installed under {registry.root}")
        return EXIT_SUCCESS

    width = max(len(b.name) for b in builds)
    for build in builds:
        line = f"{build.name:<{width}}: {build.prefix}"
        if not build.is_complete:
            line += " (incomplete)"
        print(line)

    return EXIT_SUCCESS
