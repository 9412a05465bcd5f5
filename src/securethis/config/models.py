"""Configuration data models for securethis.

``SecureThisSettings`` is the validated, in-process form of the ``config``
value exported by ``securethis_config.py``. The file itself uses the
camelCase keys of :class:`securethis.types.SecureThisConfig`.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

CONFIG_FILE_NAME = "securethis_config.py"

# Name of the module-level value the config file must define.
CONFIG_VARIABLE_NAME = "config"

# Name of the type the generated file annotates its value with.
CONFIG_TYPE_NAME = "SecureThisConfig"

OUTPUT_DIR_KEY = "outputDirRelative"
SAST_EXCLUDE_KEY = "sastExclude"

DEFAULT_OUTPUT_DIR = "securethis-results"

DEFAULT_SAST_EXCLUDE: List[str] = [
    "glob(**/node_modules/**)",
    "glob(**/dist/**)",
    "glob(**/build/**)",
    "glob(**/securethis-results/**)",
    "coverage",
    "glob(**/test*/**)",
    "glob(**/*spec*/**)",
    "glob(**/__tests__/**)",
    "target",  # Java/Maven build output
    ".venv",
    "glob(**/__pycache__/**)",
    ".git",
    ".svn",
    ".hg",
    "**/*.log",  # wrapped and escaped when merged
    "temp/",
]


def default_config_dict() -> Dict[str, Any]:
    """Built-in defaults in file (camelCase) form. Returns a fresh copy."""
    return {
        OUTPUT_DIR_KEY: DEFAULT_OUTPUT_DIR,
        SAST_EXCLUDE_KEY: copy.deepcopy(DEFAULT_SAST_EXCLUDE),
    }


@dataclass(frozen=True)
class SecureThisSettings:
    """Validated project configuration.

    Example securethis_config.py value:
        config = {
            "outputDirRelative": "securethis-results",
            "sastExclude": ["dist", "glob(**/__tests__/**)"],
        }
    """

    output_dir_relative: str = DEFAULT_OUTPUT_DIR
    sast_exclude: List[str] = field(default_factory=lambda: list(DEFAULT_SAST_EXCLUDE))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SecureThisSettings":
        """Build settings from an already validated file-form dict."""
        return cls(
            output_dir_relative=data[OUTPUT_DIR_KEY],
            sast_exclude=list(data[SAST_EXCLUDE_KEY]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the file (camelCase) form."""
        return {
            OUTPUT_DIR_KEY: self.output_dir_relative,
            SAST_EXCLUDE_KEY: list(self.sast_exclude),
        }
