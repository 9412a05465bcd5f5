"""Argument parser for the securethis CLI."""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_project_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--cwd",
        metavar="PATH",
        type=Path,
        default=None,
        help="Directory to start searching for the project root (default: current directory).",
    )
    parser.add_argument(
        "--local-types",
        action="store_true",
        help="Reference the local securethis types.py in generated config files "
        "instead of the installed package (for development and tests).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="securethis",
        description="securethis - run a Fluid Attacks SAST scan using securethis_config.py.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show securethis version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )

    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan the project (creates securethis_config.py on first run).",
    )
    _add_project_args(scan_parser)
    scan_parser.add_argument(
        "--image",
        metavar="IMAGE",
        default=None,
        help="Fluid Attacks container image (default: $SECURETHIS_IMAGE or fluidattacks/cli:latest).",
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Write (or overwrite) securethis_config.py with default settings.",
    )
    _add_project_args(init_parser)
    init_parser.add_argument(
        "--output-dir",
        metavar="DIR",
        default=None,
        help="Results directory relative to the project root.",
    )
    init_parser.add_argument(
        "--exclude",
        action="append",
        dest="excludes",
        metavar="PATTERN",
        help="SAST exclusion path or glob(...) pattern; replaces the default list "
        "(can be specified multiple times).",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check securethis_config.py without scanning.",
    )
    validate_parser.add_argument(
        "--cwd",
        metavar="PATH",
        type=Path,
        default=None,
        help="Directory to start searching for the project root (default: current directory).",
    )

    return parser
