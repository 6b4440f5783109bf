"""
Init command implementation.

Creates the root directory and a default entries file.
"""

import logging

from llvmenv.cli.utils import EXIT_SUCCESS, get_config_store, report_error
from llvmenv.core.exceptions import LLVMEnvError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the init command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    logger.debug(f"Arguments: {args}")
    store = get_config_store(args)

    try:
        config_file = store.init(force=args.force)
    except LLVMEnvError as e:
        return report_error(e)

    logger.info(f"Root directory: {store.root_directory()}")
    logger.info(f"Entries file written to {config_file}")
    print(config_file)
    return EXIT_SUCCESS
