"""CLI runner: parses arguments and dispatches to commands."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Dict, Iterable, Optional

from securethis.cli.arguments import build_parser
from securethis.cli.commands import Command, InitCommand, ScanCommand, ValidateCommand
from securethis.cli.exit_codes import EXIT_SUCCESS
from securethis.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version("securethis")
    except PackageNotFoundError:
        # Fallback for source checkouts that are not installed.
        from securethis import __version__

        return __version__


class CLIRunner:
    """Parses arguments, configures logging and runs the selected command."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {
            command.name: command
            for command in (ScanCommand(), InitCommand(), ValidateCommand())
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        parser = build_parser()
        args = parser.parse_args(list(argv) if argv is not None else None)

        configure_logging(debug=args.debug, verbose=args.verbose, quiet=args.quiet)

        if args.version:
            print(get_version())
            return EXIT_SUCCESS

        if not args.command:
            parser.print_help()
            return EXIT_SUCCESS

        LOGGER.debug(f"Running command: {args.command}")
        return self._commands[args.command].execute(args)
