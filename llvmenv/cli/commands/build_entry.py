"""
Build-entry command implementation.

Checks out, optionally updates, and builds one entry.
"""

import logging

from llvmenv.build.executor import BuildExecutor
from llvmenv.cli.utils import EXIT_SUCCESS, get_config_store, report_error
from llvmenv.core.exceptions import LLVMEnvError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the build-entry command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    logger.debug(f"Arguments: {args}")
    store = get_config_store(args)

    try:
        entry = store.load_entry(args.name)
        executor = BuildExecutor(store.root_directory())
        build = executor.run(
            entry, update=args.update, nproc=args.nproc, clean=args.clean
        )
    except LLVMEnvError as e:
        return report_error(e)

    print(f"{build.name}: {build.prefix}")
    return EXIT_SUCCESS
