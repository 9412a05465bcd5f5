"""Scan command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from rich.console import Console
from rich.markup import escape

from securethis.cli.commands import Command, type_source_from_args
from securethis.cli.exit_codes import (
    EXIT_INVALID_USAGE,
    EXIT_ISSUES_FOUND,
    EXIT_PACKAGING_ERROR,
    EXIT_SCANNER_ERROR,
    EXIT_SUCCESS,
)
from securethis.core.errors import (
    BaseConfigError,
    ConfigInvalidError,
    ConfigMissingError,
    ProjectRootNotFoundError,
    ScanExecutionError,
)
from securethis.core.logging import get_logger
from securethis.core.models import ScanOptions, ScanResult
from securethis.scan import security_scan

LOGGER = get_logger(__name__)


class ScanCommand(Command):
    """Runs the Fluid Attacks scan for the current project."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(soft_wrap=True)
        self._err_console = console or Console(stderr=True, soft_wrap=True)

    @property
    def name(self) -> str:
        """Command identifier."""
        return "scan"

    def execute(self, args: Namespace) -> int:
        """Execute the scan command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code based on scan results.
        """
        options = ScanOptions(
            cwd=args.cwd,
            image=getattr(args, "image", None),
            type_source=type_source_from_args(args),
        )

        self._console.print("[blue]Starting Security Scan...[/blue]")

        try:
            result = security_scan(options)
        except ConfigMissingError as e:
            self._console.print(f"\n[yellow]{escape(str(e))}[/yellow]")
            return EXIT_SUCCESS
        except ProjectRootNotFoundError as e:
            self._error(str(e), "Please run this tool from within your project.")
            return EXIT_INVALID_USAGE
        except ConfigInvalidError as e:
            self._error(str(e), "Fix the config file (or delete it to regenerate defaults).")
            return EXIT_INVALID_USAGE
        except BaseConfigError as e:
            self._error(str(e), "The securethis installation looks broken; reinstall it.")
            return EXIT_PACKAGING_ERROR
        except ScanExecutionError as e:
            self._error("Error executing Docker command.", str(e))
            return EXIT_SCANNER_ERROR
        except OSError as e:
            self._error(
                str(e),
                "Check the project's file permissions and the configured output directory.",
            )
            return EXIT_INVALID_USAGE

        return self._report(result)

    def _error(self, message: str, hint: str) -> None:
        LOGGER.debug(message)
        self._err_console.print(f"[red]Error: {escape(message)}[/red]")
        self._err_console.print(f"[red]{escape(hint)}[/red]")

    def _report(self, result: ScanResult) -> int:
        self._console.print(f"[dim]Results directory: {escape(str(result.output_dir_absolute))}[/dim]")

        if result.artifact_path is None:
            self._console.print(
                "\n[yellow]Fluid Attacks scan complete, but no results file was produced.[/yellow]"
            )
            return EXIT_SUCCESS

        summary = result.summary
        if summary is None:
            self._console.print(
                f"\n[yellow]Could not read the Fluid Attacks results file at "
                f"{escape(str(result.artifact_path))}.[/yellow]"
            )
            return EXIT_SUCCESS

        if summary.clean:
            self._console.print(
                "\n[bold green]Fluid Attacks scan complete. No vulnerabilities found![/bold green]"
            )
            return EXIT_SUCCESS

        if summary.undetermined:
            self._console.print(
                "\n[bold yellow]Fluid Attacks scan complete. Results file generated, but could "
                "not determine vulnerability status from summary message.[/bold yellow]"
            )
            self._console.print(f"Please review the results: file://{escape(str(result.artifact_path))}")
            return EXIT_SUCCESS

        self._console.print(
            f"\n[bold red]Fluid Attacks scan complete. {summary.issue_count} potential "
            f"issue(s) found.[/bold red]"
        )
        self._console.print(f"[red]Please review the results: file://{escape(str(result.artifact_path))}[/red]")
        return EXIT_ISSUES_FOUND
