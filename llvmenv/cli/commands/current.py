"""
Current command implementation.

Shows the name of the active build for the current directory.
"""

import sys

from llvmenv.cli.utils import EXIT_SUCCESS, get_resolver, report_error
from llvmenv.core.exceptions import LLVMEnvError


def run(args) -> int:
    """
    Run the current command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 4 if no build is active)
    """
    try:
        pointer = get_resolver(args).seek()
    except LLVMEnvError as e:
        return report_error(e)

    print(pointer.resolved_name)
    if args.show_source:
        print_source(pointer)
    return EXIT_SUCCESS


def print_source(pointer) -> None:
    """Print which marker file set the active build to stderr."""
    if pointer.source_path is None:
        return
    suffix = " (global)" if pointer.is_global else ""
    print(f"set by {pointer.source_path}{suffix}", file=sys.stderr)
