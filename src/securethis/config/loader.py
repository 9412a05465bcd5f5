"""Loading of project-local ``securethis_config.py`` files.

The config file is a Python module, but it is never imported or executed.
It is parsed with :mod:`ast` and the value assigned to ``config`` is
evaluated with :func:`ast.literal_eval`, so only literals (strings, lists,
dicts, numbers) are accepted.

A missing file is replaced by a freshly generated default and reported
with :class:`ConfigMissingError` so the user reviews it before scanning.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any, Optional

from securethis.config.generator import TypeSource, generate_config_file
from securethis.config.models import (
    CONFIG_FILE_NAME,
    CONFIG_VARIABLE_NAME,
    SecureThisSettings,
)
from securethis.config.validation import validate_config
from securethis.core.errors import (
    ConfigInvalidError,
    ConfigMissingError,
    ConfigValidationError,
)
from securethis.core.logging import get_logger

LOGGER = get_logger(__name__)


def config_file_path(project_root: Path) -> Path:
    """Return the expected config file location for a project."""
    return Path(project_root) / CONFIG_FILE_NAME


def evaluate_config_source(source: str, filename: str = CONFIG_FILE_NAME) -> Any:
    """Extract the literal value assigned to ``config`` in module source.

    Both ``config = {...}`` and ``config: SecureThisConfig = {...}`` are
    recognised. If the name is assigned more than once, the last module-level
    assignment wins, as it would on import.

    Raises:
        SyntaxError: If the source does not parse.
        ValueError: If there is no ``config`` assignment or its value is
            not a literal.
    """
    tree = ast.parse(source, filename=filename)

    value_node: Optional[ast.expr] = None
    for node in tree.body:
        if isinstance(node, ast.Assign):
            if any(
                isinstance(target, ast.Name) and target.id == CONFIG_VARIABLE_NAME
                for target in node.targets
            ):
                value_node = node.value
        elif isinstance(node, ast.AnnAssign):
            if (
                isinstance(node.target, ast.Name)
                and node.target.id == CONFIG_VARIABLE_NAME
                and node.value is not None
            ):
                value_node = node.value

    if value_node is None:
        raise ValueError(f"no module-level '{CONFIG_VARIABLE_NAME}' assignment found")

    try:
        return ast.literal_eval(value_node)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"'{CONFIG_VARIABLE_NAME}' must be a plain literal value ({e})"
        ) from e


def load_config(
    project_root: Path,
    type_source: Optional[TypeSource] = None,
) -> SecureThisSettings:
    """Load and validate the project's ``securethis_config.py``.

    Args:
        project_root: Absolute path of the target project.
        type_source: Type import used if a default file has to be generated.

    Returns:
        Validated settings.

    Raises:
        ConfigMissingError: If no file existed; a default one was created.
        ConfigInvalidError: If the file cannot be evaluated or validated.
    """
    config_path = config_file_path(project_root)

    if not config_path.exists():
        LOGGER.debug(f"No config file at {config_path}, generating default")
        generate_config_file(project_root, type_source=type_source)
        raise ConfigMissingError(config_path)

    try:
        source = config_path.read_text(encoding="utf-8")
        data = evaluate_config_source(source, filename=str(config_path))
    except (OSError, SyntaxError, ValueError) as e:
        raise ConfigInvalidError(config_path, str(e)) from e

    try:
        settings = validate_config(data, source=str(config_path))
    except ConfigValidationError as e:
        raise ConfigInvalidError(config_path, str(e)) from e

    LOGGER.debug(f"Loaded config from {config_path}")
    return settings
