"""
Local command implementation.

Sets the build used in a directory and its subdirectories.
"""

import logging
from pathlib import Path

from llvmenv.cli.utils import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    get_resolver,
    print_error,
    report_error,
)
from llvmenv.core.exceptions import LLVMEnvError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the local command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 3 if the build does not exist)
    """
    directory = Path(args.path).resolve() if args.path else Path.cwd()

    try:
        marker = get_resolver(args).set_local(args.name, directory)
    except LLVMEnvError as e:
        return report_error(e)
    except NotADirectoryError as e:
        print_error(str(e))
        return EXIT_FAILURE

    logger.debug(f"Wrote {marker}")
    return EXIT_SUCCESS
