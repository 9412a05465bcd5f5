"""Public type for project-local ``securethis_config.py`` files.

Generated config files import :class:`SecureThisConfig` under
``TYPE_CHECKING`` so editors and type checkers can verify the literal.
"""

from __future__ import annotations

from typing import List, TypedDict


class SecureThisConfig(TypedDict):
    """Shape of the ``config`` value exported by ``securethis_config.py``."""

    # Directory where scan results will be saved, relative to the project root.
    outputDirRelative: str

    # SAST exclusion paths. Entries can be simple paths (e.g. "dist",
    # "vendor/some_lib") or explicit glob patterns (e.g. "glob(**/__tests__/**)").
    # Simple paths are wrapped with glob() before they reach Fluid Attacks.
    sastExclude: List[str]
