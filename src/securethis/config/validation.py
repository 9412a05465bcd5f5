"""Configuration validation for securethis.

Checks the shape of a loaded ``config`` value. Types are never coerced:
a value of the wrong type is an error. Unknown keys only produce warnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, List, Optional, Set

from securethis.config.models import (
    OUTPUT_DIR_KEY,
    SAST_EXCLUDE_KEY,
    SecureThisSettings,
)
from securethis.core.errors import ConfigValidationError
from securethis.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_TOP_LEVEL_KEYS: Set[str] = {
    OUTPUT_DIR_KEY,
    SAST_EXCLUDE_KEY,
}

REQUIRED_KEYS = [OUTPUT_DIR_KEY, SAST_EXCLUDE_KEY]


@dataclass
class ConfigValidationIssue:
    """A single problem found while validating configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def find_config_issues(data: Any, source: str) -> List[ConfigValidationIssue]:
    """Collect shape errors for a loaded config value.

    Unknown keys are logged as warnings and are not returned.

    Args:
        data: Value loaded from the config file.
        source: Config file path, used in messages.

    Returns:
        List of errors; empty when the value is valid.
    """
    if not isinstance(data, dict):
        return [ConfigValidationIssue(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        )]

    issues: List[ConfigValidationIssue] = []

    unknown_keys: Set[str] = set()
    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            unknown_keys.add(str(key))
            suggestion = _suggest_key(str(key), VALID_TOP_LEVEL_KEYS)
            _log_unknown_key(str(key), source, suggestion)

    for key in REQUIRED_KEYS:
        if key not in data:
            # A misspelled key shows up as both unknown and missing.
            misspelled = _suggest_key(key, unknown_keys)
            issues.append(ConfigValidationIssue(
                message=f"Missing required key '{key}'",
                source=source,
                key=key,
                suggestion=f"rename '{misspelled}' to '{key}'" if misspelled else None,
            ))

    output_dir = data.get(OUTPUT_DIR_KEY)
    if OUTPUT_DIR_KEY in data:
        if not isinstance(output_dir, str):
            issues.append(ConfigValidationIssue(
                message=f"'{OUTPUT_DIR_KEY}' must be a string, got {type(output_dir).__name__}",
                source=source,
                key=OUTPUT_DIR_KEY,
            ))
        elif not output_dir.strip():
            issues.append(ConfigValidationIssue(
                message=f"'{OUTPUT_DIR_KEY}' must not be empty",
                source=source,
                key=OUTPUT_DIR_KEY,
            ))

    sast_exclude = data.get(SAST_EXCLUDE_KEY)
    if SAST_EXCLUDE_KEY in data:
        if not isinstance(sast_exclude, list):
            issues.append(ConfigValidationIssue(
                message=f"'{SAST_EXCLUDE_KEY}' must be a list, got {type(sast_exclude).__name__}",
                source=source,
                key=SAST_EXCLUDE_KEY,
            ))
        else:
            for index, entry in enumerate(sast_exclude):
                if not isinstance(entry, str):
                    issues.append(ConfigValidationIssue(
                        message=(
                            f"'{SAST_EXCLUDE_KEY}[{index}]' must be a string, "
                            f"got {type(entry).__name__}"
                        ),
                        source=source,
                        key=f"{SAST_EXCLUDE_KEY}[{index}]",
                    ))

    return issues


def validate_config(data: Any, source: str) -> SecureThisSettings:
    """Validate a loaded config value and convert it to settings.

    Args:
        data: Value loaded from the config file.
        source: Config file path, used in messages.

    Returns:
        Validated settings.

    Raises:
        ConfigValidationError: If any field has the wrong shape.
    """
    issues = find_config_issues(data, source)
    if issues:
        raise ConfigValidationError(issues, source)
    return SecureThisSettings.from_dict(data)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_unknown_key(key: str, source: str, suggestion: Optional[str]) -> None:
    msg = f"Unknown key '{key}' in {source}"
    if suggestion:
        msg += f" (did you mean '{suggestion}'?)"
    LOGGER.warning(msg)
