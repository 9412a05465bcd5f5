"""Init command implementation.

Writes a default securethis_config.py into the project root.
"""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape

from securethis.cli.commands import Command, type_source_from_args
from securethis.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from securethis.config.generator import generate_config_file
from securethis.config.models import OUTPUT_DIR_KEY, SAST_EXCLUDE_KEY
from securethis.core.errors import ConfigValidationError, ProjectRootNotFoundError
from securethis.core.logging import get_logger
from securethis.core.paths import find_project_root

LOGGER = get_logger(__name__)


class InitCommand(Command):
    """Creates (or overwrites) the project's securethis_config.py."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(soft_wrap=True)

    @property
    def name(self) -> str:
        """Command identifier."""
        return "init"

    def execute(self, args: Namespace) -> int:
        cwd = Path(args.cwd) if args.cwd else Path.cwd()
        try:
            project_root = find_project_root(cwd)
        except ProjectRootNotFoundError as e:
            self._console.print(f"[red]Error: {escape(str(e))}[/red]")
            return EXIT_INVALID_USAGE

        overrides = self._overrides_from_args(args)
        try:
            config_path = generate_config_file(
                project_root,
                overrides=overrides,
                type_source=type_source_from_args(args),
            )
        except (ConfigValidationError, OSError) as e:
            self._console.print(f"[red]Error: {escape(str(e))}[/red]")
            return EXIT_INVALID_USAGE

        self._console.print(
            f"\n[yellow]Created a default configuration file: {escape(str(config_path))}[/yellow]"
        )
        self._console.print("Please review it before running [bold]securethis scan[/bold].")
        return EXIT_SUCCESS

    @staticmethod
    def _overrides_from_args(args: Namespace) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        output_dir = getattr(args, "output_dir", None)
        if output_dir is not None:
            overrides[OUTPUT_DIR_KEY] = output_dir
        excludes = getattr(args, "excludes", None)
        if excludes:
            overrides[SAST_EXCLUDE_KEY] = list(excludes)
        return overrides
