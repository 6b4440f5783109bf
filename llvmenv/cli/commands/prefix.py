"""
Prefix command implementation.

Shows the install prefix of the active build.
"""

from llvmenv.cli.commands.current import print_source
from llvmenv.cli.utils import EXIT_SUCCESS, get_resolver, report_error
from llvmenv.core.exceptions import LLVMEnvError


def run(args) -> int:
    """
    Run the prefix command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 4 if no build is active)
    """
    try:
        build, pointer = get_resolver(args).resolve_build()
    except LLVMEnvError as e:
        return report_error(e)

    print(build.prefix)
    if args.show_source:
        print_source(pointer)
    return EXIT_SUCCESS
