"""Exception hierarchy for securethis.

Library code raises these; the CLI decides how each one is reported and
which exit code it maps to.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from securethis.config.validation import ConfigValidationIssue


class SecureThisError(Exception):
    """Base class for all securethis errors."""


class ProjectRootNotFoundError(SecureThisError):
    """No project manifest was found between the start directory and the filesystem root."""

    def __init__(self, start_dir: Path, manifest_names: List[str]) -> None:
        self.start_dir = start_dir
        self.manifest_names = manifest_names
        names = ", ".join(manifest_names)
        super().__init__(
            f"Could not find a project manifest ({names}) in {start_dir} "
            "or any parent directory"
        )


class ConfigError(SecureThisError):
    """Project configuration could not be used."""


class ConfigMissingError(ConfigError):
    """The config file did not exist and a default one has just been created.

    Not a failure as such: the caller should ask the user to review the new
    file and run again.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        super().__init__(
            f"A config file has been created at {config_path}. "
            "Please review it and run the scan again."
        )


class ConfigInvalidError(ConfigError):
    """The config file exists but could not be evaluated or validated."""

    def __init__(self, config_path: Path, reason: str) -> None:
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Invalid config file {config_path}: {reason}")


class ConfigValidationError(ConfigError):
    """A loaded config value does not match the expected shape."""

    def __init__(self, issues: List["ConfigValidationIssue"], source: str) -> None:
        self.issues = issues
        self.source = source
        details = "; ".join(
            f"{issue.message} ({issue.suggestion})" if issue.suggestion else issue.message
            for issue in issues
        )
        super().__init__(f"{source}: {details}")

    @property
    def keys(self) -> List[Optional[str]]:
        """Keys of the offending fields, in the order they were found."""
        return [issue.key for issue in self.issues]


class BaseConfigError(SecureThisError):
    """The bundled scanner base config is missing or unreadable (packaging defect)."""


class ScanExecutionError(SecureThisError):
    """The external scanner process failed to start or exited non-zero."""

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        self.returncode = returncode
        super().__init__(message)
