"""
Global command implementation.

Sets the build used when no local override applies.
"""

import logging

from llvmenv.cli.utils import EXIT_SUCCESS, get_resolver, report_error
from llvmenv.core.exceptions import LLVMEnvError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the global command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 3 if the build does not exist)
    """
    try:
        marker = get_resolver(args).set_global(args.name)
    except LLVMEnvError as e:
        return report_error(e)

    logger.debug(f"Wrote {marker}")
    return EXIT_SUCCESS
