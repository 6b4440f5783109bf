"""
llvmenv CLI argument parser.

This module implements the command-line interface for llvmenv using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("llvmenv")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

COMMAND_MODULES = {
    "init": "llvmenv.cli.commands.init",
    "builds": "llvmenv.cli.commands.builds",
    "entries": "llvmenv.cli.commands.entries",
    "build-entry": "llvmenv.cli.commands.build_entry",
    "current": "llvmenv.cli.commands.current",
    "prefix": "llvmenv.cli.commands.prefix",
    "global": "llvmenv.cli.commands.set_global",
    "local": "llvmenv.cli.commands.set_local",
    "zsh": "llvmenv.cli.commands.zsh",
}


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


class CLI:
    """llvmenv command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="llvmenv",
            description="Manage multiple LLVM/Clang builds",
            epilog='Use "llvmenv COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"llvmenv {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--root",
            type=Path,
            metavar="PATH",
            help="Root data directory (default: $LLVMENV_ROOT or ~/.llvmenv)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Entries file (default: $LLVMENV_CONFIG or <root>/entries.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_init_command(subparsers)
        self._add_builds_command(subparsers)
        self._add_entries_command(subparsers)
        self._add_build_entry_command(subparsers)
        self._add_current_command(subparsers)
        self._add_prefix_command(subparsers)
        self._add_global_command(subparsers)
        self._add_local_command(subparsers)
        self._add_zsh_command(subparsers)

        return parser

    def _add_init_command(self, subparsers):
        """Add 'init' subcommand."""
        parser = subparsers.add_parser(
            "init",
            help="Initialize llvmenv",
            description="Create the root directory and a default entries file",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite an existing entries file",
        )

    def _add_builds_command(self, subparsers):
        """Add 'builds' subcommand."""
        subparsers.add_parser(
            "builds",
            help="List usable builds",
            description="List installed builds and their prefixes",
        )

    def _add_entries_command(self, subparsers):
        """Add 'entries' subcommand."""
        parser = subparsers.add_parser(
            "entries",
            help="List entries to be built",
            description="List the entries declared in the entries file",
        )
        parser.add_argument(
            "--long",
            "-l",
            action="store_true",
            help="Show the source of each entry",
        )

    def _add_build_entry_command(self, subparsers):
        """Add 'build-entry' subcommand."""
        parser = subparsers.add_parser(
            "build-entry",
            help="Build LLVM/Clang",
            description="Check out, optionally update, and build an entry",
        )
        parser.add_argument("name", help="Entry to build")
        parser.add_argument(
            "--update",
            "-u",
            action="store_true",
            help="Update the source from its remote before building",
        )
        parser.add_argument(
            "--nproc",
            "-j",
            type=_positive_int,
            metavar="N",
            help="Parallel compile jobs (default: number of available CPUs)",
        )
        parser.add_argument(
            "--clean",
            action="store_true",
            help="Remove the build directory before configuring",
        )

    def _add_current_command(self, subparsers):
        """Add 'current' subcommand."""
        parser = subparsers.add_parser(
            "current",
            help="Show the name of current build",
            description="Show the name of the active build for this directory",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            dest="show_source",
            action="store_true",
            help="Also show which file set the build",
        )

    def _add_prefix_command(self, subparsers):
        """Add 'prefix' subcommand."""
        parser = subparsers.add_parser(
            "prefix",
            help="Show the prefix of the current build",
            description="Show the install prefix of the active build",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            dest="show_source",
            action="store_true",
            help="Also show which file set the build",
        )

    def _add_global_command(self, subparsers):
        """Add 'global' subcommand."""
        parser = subparsers.add_parser(
            "global",
            help="Set the build to use (global)",
            description="Set the default build used when no local override applies",
        )
        parser.add_argument("name", help="Build name")

    def _add_local_command(self, subparsers):
        """Add 'local' subcommand."""
        parser = subparsers.add_parser(
            "local",
            help="Set the build to use (local)",
            description="Set the build used in a directory and its subdirectories",
        )
        parser.add_argument("name", help="Build name")
        parser.add_argument(
            "--path",
            "-p",
            type=Path,
            metavar="PATH",
            help="Directory to set the build for (default: current directory)",
        )

    def _add_zsh_command(self, subparsers):
        """Add 'zsh' subcommand."""
        subparsers.add_parser(
            "zsh",
            help="Setup Zsh integration",
            description='Print the zsh integration script; use: source <(llvmenv zsh)',
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
