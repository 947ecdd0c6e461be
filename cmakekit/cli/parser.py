"""
cmakekit CLI argument parser.

This module implements the command-line interface for cmakekit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cmakekit.core.exceptions import CmakeKitError
from cmakekit.core.locking import LOCK_STRATEGIES
from cmakekit.tool.tool import SUITE_TOOLS

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("cmakekit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

COMMANDS = ("versions", "resolve", "install", "run")


class CLI:
    """cmakekit command-line interface."""

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
            prog="cmakekit",
            description="cmakekit - install CMake versions from the published catalog",
            epilog='Use "cmakekit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"cmakekit {__version__}"
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
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./cmakekit.yaml)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="DIR",
            help="Cache directory (default: ~/.cmakekit or $CMAKEKIT_HOME)",
        )
        parser.add_argument(
            "--catalog",
            metavar="PATH_OR_URL",
            help="Installable catalog file or URL",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_versions_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_install_command(subparsers)
        self._add_run_command(subparsers)

        return parser

    @staticmethod
    def _add_host_options(parser):
        parser.add_argument(
            "--os",
            metavar="NAME",
            help="Host OS name to resolve for (default: this host, e.g. Linux)",
        )
        parser.add_argument(
            "--arch",
            metavar="ARCH",
            help="Host architecture to resolve for (default: this host, e.g. amd64)",
        )

    def _add_versions_command(self, subparsers):
        """Add 'versions' subcommand."""
        subparsers.add_parser(
            "versions",
            help="List available CMake versions",
            description="List the version ids in the installable catalog",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show the download URL for a version",
            description="Resolve the archive of a CMake version for a host",
        )
        parser.add_argument("version", metavar="VERSION", help="Version id (e.g. 3.20.0)")
        self._add_host_options(parser)

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install a CMake version",
            description="Download, extract and normalize a CMake version if needed",
        )
        parser.add_argument("version", metavar="VERSION", help="Version id (e.g. 3.20.0)")
        self._add_host_options(parser)
        parser.add_argument(
            "--lock",
            choices=LOCK_STRATEGIES,
            help="Lock strategy for concurrent installs (none|file)",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Reinstall even if the installation is up to date",
        )

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run cmake, cpack or ctest of a version",
            description="Install a CMake version if needed, then run one of its tools",
            epilog="Arguments after -- are passed to the tool unchanged",
        )
        parser.add_argument("version", metavar="VERSION", help="Version id (e.g. 3.20.0)")
        self._add_host_options(parser)
        parser.add_argument(
            "--tool",
            choices=SUITE_TOOLS,
            default="cmake",
            help="Tool to run (default: cmake)",
        )
        parser.add_argument(
            "--args",
            dest="args_string",
            metavar="STRING",
            help='Tool arguments as one shell-quoted string (e.g. "-G Ninja ..")',
        )
        parser.add_argument(
            "--ignore-exit-codes",
            metavar="SPEC",
            help='Exit codes that count as success (e.g. "1,20-30")',
        )
        parser.add_argument(
            "--lock",
            choices=LOCK_STRATEGIES,
            help="Lock strategy for concurrent installs (none|file)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Everything after the first ``--`` is kept verbatim in ``tool_args``.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        argv = list(sys.argv[1:] if args is None else args)
        tool_args: List[str] = []
        if "--" in argv:
            idx = argv.index("--")
            argv, tool_args = argv[:idx], argv[idx + 1 :]

        parsed = self.parser.parse_args(argv)
        parsed.tool_args = tool_args
        return parsed

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
        except CmakeKitError as e:
            logger.error(f"Error: {e}")
            return 1
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

        logging.basicConfig(level=level, format=format_str, force=True)

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        if args.command not in COMMANDS:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(f"cmakekit.cli.commands.{args.command}")
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
