"""
Entries command implementation.

Lists the entries declared in the entries file.
"""

import logging

from llvmenv.cli.utils import EXIT_SUCCESS, get_config_store, report_error
from llvmenv.core.exceptions import LLVMEnvError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the entries command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for configuration errors)
    """
    store = get_config_store(args)

    try:
        entries = store.load()
    except LLVMEnvError as e:
        return report_error(e)

    if not entries:
        logger.info(f"No entries declared in {store.config_file}")
        return EXIT_SUCCESS

    width = max(len(entry.name) for entry in entries)
    for entry in entries:
        if args.long:
            print(f"{entry.name:<{width}}: {entry.describe()}")
        else:
            print(entry.name)

    return EXIT_SUCCESS
