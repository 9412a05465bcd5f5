"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import Optional

from securethis.config.generator import TypeSource


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


def type_source_from_args(args: Namespace) -> Optional[TypeSource]:
    """Local types.py source when --local-types is set, else the package default."""
    if getattr(args, "local_types", False):
        return TypeSource.local()
    return None


# Import command implementations for convenience
# ruff: noqa: E402
from securethis.cli.commands.init import InitCommand
from securethis.cli.commands.scan import ScanCommand
from securethis.cli.commands.validate import ValidateCommand

__all__ = [
    "Command",
    "InitCommand",
    "ScanCommand",
    "ValidateCommand",
    "type_source_from_args",
]
