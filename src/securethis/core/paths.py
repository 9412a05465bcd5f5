"""Project root discovery."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from securethis.core.errors import ProjectRootNotFoundError
from securethis.core.logging import get_logger

LOGGER = get_logger(__name__)

# Files that mark the root of a scannable project, checked in order per directory.
PROJECT_MANIFEST_NAMES = ["pyproject.toml", "setup.py", "setup.cfg", "package.json"]


def find_manifest(
    start_dir: Path,
    manifest_names: Sequence[str] = PROJECT_MANIFEST_NAMES,
) -> Optional[Path]:
    """Search upward from start_dir for the nearest project manifest.

    Args:
        start_dir: Directory to start searching from.
        manifest_names: Manifest file names to look for.

    Returns:
        Path to the first manifest found, or None if the filesystem root
        is reached without a match.
    """
    current = start_dir.resolve()
    for directory in [current, *current.parents]:
        for name in manifest_names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def find_project_root(
    start_dir: Path,
    manifest_names: Sequence[str] = PROJECT_MANIFEST_NAMES,
) -> Path:
    """Return the directory holding the nearest project manifest.

    Raises:
        ProjectRootNotFoundError: If no manifest exists up to the filesystem root.
    """
    manifest = find_manifest(start_dir, manifest_names)
    if manifest is None:
        raise ProjectRootNotFoundError(start_dir, list(manifest_names))
    LOGGER.debug(f"Found project manifest at {manifest}")
    return manifest.parent
