"""Generation of project-local ``securethis_config.py`` files.

The generated file is a Python module whose ``config`` value is a plain
literal annotated with :class:`securethis.types.SecureThisConfig`. The type
import is guarded by ``TYPE_CHECKING`` and is never executed by the loader.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from securethis.config.models import (
    CONFIG_FILE_NAME,
    CONFIG_TYPE_NAME,
    CONFIG_VARIABLE_NAME,
    default_config_dict,
)
from securethis.config.validation import find_config_issues
from securethis.core.errors import ConfigValidationError
from securethis.core.logging import get_logger

LOGGER = get_logger(__name__)

TYPES_MODULE = "securethis.types"
TYPES_FILE = Path(__file__).resolve().parent.parent / "types.py"

FILE_HEADER = (
    "# Security Scan Configuration File ({file_name})\n"
    "# Please review and adjust these settings as needed for your project.\n"
)


def get_package_name() -> str:
    """Return the import name of the installed securethis package."""
    return __name__.partition(".")[0]


@dataclass(frozen=True)
class TypeSource:
    """Where a generated config file imports ``SecureThisConfig`` from.

    ``package`` sources import from the published package. ``local`` sources
    point at the types module of a source checkout by absolute path, which is
    what tests and local development use.
    """

    kind: str
    target: str

    PACKAGE = "package"
    LOCAL = "local"

    @classmethod
    def package(cls, package_name: Optional[str] = None) -> "TypeSource":
        return cls(kind=cls.PACKAGE, target=package_name or get_package_name())

    @classmethod
    def local(cls, absolute_path: Optional[Path] = None) -> "TypeSource":
        path = Path(absolute_path) if absolute_path else TYPES_FILE
        return cls(kind=cls.LOCAL, target=str(path.resolve()))

    def import_lines(self) -> str:
        """Render the (TYPE_CHECKING-guarded) import block body."""
        if self.kind == self.LOCAL:
            return (
                f"    # {CONFIG_TYPE_NAME} is defined in {self.target}\n"
                f"    from {TYPES_MODULE} import {CONFIG_TYPE_NAME}\n"
            )
        return f"    from {self.target} import {CONFIG_TYPE_NAME}\n"


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge

    Args:
        base: Base configuration dictionary.
        overlay: Overlay configuration to merge on top.

    Returns:
        Merged configuration dictionary.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        elif isinstance(overlay_value, list):
            result[key] = list(overlay_value)
        else:
            result[key] = overlay_value

    return result


def build_default_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return built-in defaults with caller overrides applied."""
    return merge_configs(default_config_dict(), overrides or {})


def format_literal(value: Any, indent: int = 0) -> str:
    """Format a config value as Python literal source.

    Strings use JSON quoting, which is also valid Python. Containers are
    laid out one item per line; any other value is written with repr() so
    that True, False and None stay Python literals.
    """
    pad = " " * (indent + 4)
    closing = " " * indent
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [
            f"{pad}{format_literal(key)}: {format_literal(item, indent + 4)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(items) + f"\n{closing}}}"
    if isinstance(value, list):
        if not value:
            return "[]"
        items = [f"{pad}{format_literal(item, indent + 4)}," for item in value]
        return "[\n" + "\n".join(items) + f"\n{closing}]"
    return repr(value)


def render_config_source(
    config: Dict[str, Any],
    type_source: TypeSource,
    file_name: str = CONFIG_FILE_NAME,
) -> str:
    """Render the Python source of a config file.

    The value is written with :func:`format_literal`, so the loader can read
    it back with :func:`ast.literal_eval`.
    """
    literal = format_literal(config)
    return (
        FILE_HEADER.format(file_name=file_name)
        + "\n"
        + "from __future__ import annotations\n"
        + "\n"
        + "from typing import TYPE_CHECKING\n"
        + "\n"
        + "if TYPE_CHECKING:\n"
        + type_source.import_lines()
        + "\n"
        + f"{CONFIG_VARIABLE_NAME}: {CONFIG_TYPE_NAME} = {literal}\n"
    )


def generate_config_file(
    project_root: Path,
    overrides: Optional[Dict[str, Any]] = None,
    type_source: Optional[TypeSource] = None,
) -> Path:
    """Write a default ``securethis_config.py`` into the project root.

    Any existing file is overwritten.

    Args:
        project_root: Absolute path of the target project.
        overrides: Partial config (file-form keys) replacing defaults.
            Lists replace the default list wholesale.
        type_source: Where the file imports its type from. Defaults to
            the published package.

    Returns:
        Path of the written file.

    Raises:
        ConfigValidationError: If the overrides produce an invalid config.
        OSError: If the file cannot be written.
    """
    config_path = Path(project_root) / CONFIG_FILE_NAME
    config = build_default_config(overrides)

    issues = find_config_issues(config, source="<overrides>")
    if issues:
        raise ConfigValidationError(issues, source="<overrides>")

    source = render_config_source(config, type_source or TypeSource.package())
    config_path.write_text(source, encoding="utf-8")

    LOGGER.info(f"Created a default configuration file: {config_path}")
    return config_path
