"""Result and option types shared by the scan orchestrator and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from securethis.config.generator import TypeSource


@dataclass
class ScanOptions:
    """Options for a single scan run."""

    # Start point for finding the nearest project manifest (default: cwd).
    cwd: Optional[Path] = None

    # Container image running the scanner (default: engine default).
    image: Optional[str] = None

    # Type import used if a default config file has to be generated.
    type_source: Optional["TypeSource"] = None


@dataclass
class ArtifactSummary:
    """What could be read from the scanner's CSV result artifact.

    The CSV is not parsed: a fixed marker string signals a clean run,
    otherwise every non-blank line after the header counts as one issue.
    """

    no_issues_marker: bool
    issue_count: int

    @property
    def clean(self) -> bool:
        return self.no_issues_marker

    @property
    def undetermined(self) -> bool:
        """Artifact present but neither marker nor issue rows were found."""
        return not self.no_issues_marker and self.issue_count == 0


@dataclass
class ScanResult:
    """Outcome of one scan run."""

    output_dir_absolute: Path
    artifact_path: Optional[Path] = None
    summary: Optional[ArtifactSummary] = None

    @property
    def issue_count(self) -> Optional[int]:
        if self.summary is None:
            return None
        return 0 if self.summary.clean else self.summary.issue_count

    @property
    def clean(self) -> bool:
        """True only when the artifact carried the no-issues marker."""
        return self.summary is not None and self.summary.clean
