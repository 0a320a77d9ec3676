"""
nimswitch CLI argument parser.

This module implements the command-line interface for nimswitch using argparse.
Unlike a subcommand CLI, the operation is picked by flags:

    nimswitch                        list installed versions
    nimswitch TOKEN [-x CMD...]      use a version (or run CMD with it)
    nimswitch - [-x CMD...]          use the previous version
    nimswitch --stable [-x CMD...]   use the latest stable release
    nimswitch --link TOKEN DIR       register an existing directory
    nimswitch --remove TOKEN...      remove versions
    nimswitch --which FILE...        locate files of the current version
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nimswitch.core.exceptions import NimSwitchError, ValidationError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("nimswitch")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Command module mapping
COMMAND_MODULES = {
    "list": "nimswitch.cli.commands.listing",
    "use": "nimswitch.cli.commands.use",
    "link": "nimswitch.cli.commands.link",
    "remove": "nimswitch.cli.commands.remove",
    "which": "nimswitch.cli.commands.which",
}


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as ValidationError."""

    def error(self, message):
        raise ValidationError(message)


class CLI:
    """nimswitch command-line interface."""

    def __init__(self, confirm=None):
        """
        Initialize CLI with argument parser.

        Args:
            confirm: Confirmation callback overriding the terminal prompt
        """
        self.confirm = confirm
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = _ArgumentParser(
            prog="nimswitch",
            description="nimswitch - Install and switch between Nim compiler versions",
            epilog=(
                "TOKEN is a version (2.2.0), a version series (2 or 2.0), "
                "a branch or tag name (devel), or a commit (#a1b2c3d).\n"
                "The store directory is taken from $NIMSWITCH_DIR."
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "token",
            nargs="?",
            metavar="TOKEN",
            help="Version to use ('-' for the previous version)",
        )
        parser.add_argument(
            "-x",
            "--exec",
            dest="exec_command",
            nargs=argparse.REMAINDER,
            metavar="CMD",
            help="Run CMD with the version on PATH instead of switching",
        )
        parser.add_argument(
            "--stable",
            action="store_true",
            help="Use the latest stable release",
        )
        parser.add_argument(
            "--link",
            nargs=2,
            metavar=("TOKEN", "DIR"),
            help="Register an existing Nim directory as TOKEN",
        )
        parser.add_argument(
            "--remove",
            nargs="+",
            metavar="TOKEN",
            help="Remove installed versions",
        )
        parser.add_argument(
            "--which",
            nargs="+",
            metavar="FILE",
            help="Print the path of FILE in the current version's bin directory",
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nimswitch {__version__}"
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
            "--yes",
            "-y",
            action="store_true",
            help="Answer yes to all confirmations",
        )
        parser.add_argument(
            "--dir",
            dest="store_dir",
            type=Path,
            metavar="PATH",
            help="Store directory (default: $NIMSWITCH_DIR or the user data directory)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: <store>/nimswitch.yaml)",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments and determine the command.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace with a ``command`` field

        Raises:
            ValidationError: If arguments are malformed or conflict
        """
        parsed = self.parser.parse_args(args)
        parsed.command = self._select_command(parsed)
        return parsed

    def _select_command(self, args) -> str:
        modes = []
        if args.link:
            modes.append("--link")
        if args.remove:
            modes.append("--remove")
        if args.which:
            modes.append("--which")
        if args.stable:
            modes.append("--stable")
        if args.token is not None:
            modes.append(args.token)

        if len(modes) > 1:
            raise ValidationError(
                f"Conflicting arguments: {' and '.join(modes)}"
            )

        if args.exec_command is not None:
            if args.token is None and not args.stable:
                raise ValidationError("-x requires a version TOKEN or --stable")
            if not args.exec_command:
                raise ValidationError("-x requires a command to run")

        if args.token is not None and not args.token.strip():
            raise ValidationError("Version token must not be empty")

        if args.link:
            return "link"
        if args.remove:
            return "remove"
        if args.which:
            return "which"
        if args.stable or args.token is not None:
            return "use"
        return "list"

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        try:
            parsed_args = self.parse_args(args)
        except ValidationError as e:
            self.parser.print_usage(sys.stderr)
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        self._configure_logging(parsed_args)

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except (NimSwitchError, OSError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
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
        from nimswitch.cli.utils import assume_yes, create_context

        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        confirm = assume_yes if args.yes else self.confirm
        context = create_context(
            store_root=args.store_dir,
            config_file=args.config,
            confirm=confirm,
        )

        module = importlib.import_module(module_name)
        return module.run(args, context)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
