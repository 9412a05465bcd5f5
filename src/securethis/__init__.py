"""securethis - run a Fluid Attacks SAST scan against a project.

The scan is configured through a project-local ``securethis_config.py``
file. Generate it with :func:`generate_config_file` (or ``securethis init``)
and run :func:`security_scan` (or ``securethis scan``).
"""

from __future__ import annotations

__version__ = "0.1.0"

from securethis.config.generator import TypeSource, generate_config_file
from securethis.scan import ScanOptions, ScanResult, security_scan
from securethis.types import SecureThisConfig

__all__ = [
    "__version__",
    "SecureThisConfig",
    "TypeSource",
    "generate_config_file",
    "ScanOptions",
    "ScanResult",
    "security_scan",
]
