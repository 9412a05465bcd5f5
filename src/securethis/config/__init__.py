"""Configuration module for securethis.

Provides generation, loading and validation of the project-local
``securethis_config.py`` file.
"""

from securethis.config.models import (
    CONFIG_FILE_NAME,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SAST_EXCLUDE,
    SecureThisSettings,
)
from securethis.config.generator import (
    TypeSource,
    build_default_config,
    generate_config_file,
    get_package_name,
)
from securethis.config.loader import config_file_path, load_config
from securethis.config.validation import ConfigValidationIssue, validate_config

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_SAST_EXCLUDE",
    "SecureThisSettings",
    "TypeSource",
    "build_default_config",
    "generate_config_file",
    "get_package_name",
    "config_file_path",
    "load_config",
    "ConfigValidationIssue",
    "validate_config",
]
