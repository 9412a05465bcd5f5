"""Validate command implementation."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from securethis.cli.commands import Command
from securethis.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from securethis.config.loader import config_file_path, evaluate_config_source
from securethis.config.validation import validate_config
from securethis.core.errors import ConfigValidationError, ProjectRootNotFoundError
from securethis.core.paths import find_project_root


class ValidateCommand(Command):
    """Checks securethis_config.py without generating or scanning."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(soft_wrap=True)

    @property
    def name(self) -> str:
        """Command identifier."""
        return "validate"

    def execute(self, args: Namespace) -> int:
        cwd = Path(args.cwd) if args.cwd else Path.cwd()
        try:
            project_root = find_project_root(cwd)
        except ProjectRootNotFoundError as e:
            self._console.print(f"[red]Error: {escape(str(e))}[/red]")
            return EXIT_INVALID_USAGE

        config_path = config_file_path(project_root)
        try:
            source = config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._console.print(
                f"[red]No config file at {escape(str(config_path))}.[/red] "
                "Run [bold]securethis init[/bold] to create one."
            )
            return EXIT_INVALID_USAGE
        except OSError as e:
            self._console.print(f"[red]Could not read {escape(str(config_path))}: {escape(str(e))}[/red]")
            return EXIT_INVALID_USAGE

        try:
            data = evaluate_config_source(source, filename=str(config_path))
            settings = validate_config(data, source=str(config_path))
        except (SyntaxError, ValueError, ConfigValidationError) as e:
            self._console.print(f"[red]Invalid config file {escape(str(config_path))}: {escape(str(e))}[/red]")
            return EXIT_INVALID_USAGE

        self._console.print(f"[green]{escape(str(config_path))} is valid.[/green]")
        self._console.print(f"  Output directory: {escape(settings.output_dir_relative)}")
        self._console.print(f"  SAST exclusions: {len(settings.sast_exclude)}")
        return EXIT_SUCCESS
