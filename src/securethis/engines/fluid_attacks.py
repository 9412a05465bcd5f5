"""Fluid Attacks (skims) engine, run inside a Docker container.

Handles:
- Merging project exclusions into the bundled skims config
- Running `skims scan` via `docker run` with the project mounted read-only
- Renaming and summarising the CSV result artifact
"""

from __future__ import annotations

import copy
import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

import yaml

from securethis.core.errors import BaseConfigError, ScanExecutionError
from securethis.core.logging import get_logger
from securethis.core.models import ArtifactSummary

LOGGER = get_logger(__name__)

BASE_CONFIG_FILE_NAME = "base-fluid-attacks-config.yaml"
BASE_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / BASE_CONFIG_FILE_NAME

# Fixed by the output section written into every merged config.
RESULTS_FILE_NAME = "Fluid-Attacks-Results.csv"
RESULTS_FILE_PREFIX = "Fluid-Attacks-Results"
RESULTS_FORMAT = "CSV"

# Appears in the CSV when skims found nothing.
NO_ISSUES_MARKER = "Summary: No vulnerabilities were found"

CONTAINER_TARGET_DIR = "/scan-target"
CONTAINER_OUTPUT_DIR = "/scan-output"
CONTAINER_CONFIG_PATH = "/temp-merged-config/config.yaml"

MERGED_CONFIG_DIR_PREFIX = "fluid-attacks-config-"
MERGED_CONFIG_FILE_NAME = "merged-fluid-attacks-config.yaml"

DEFAULT_IMAGE = "fluidattacks/cli:latest"
IMAGE_ENV = "SECURETHIS_IMAGE"


def normalize_exclude_entry(entry: str) -> str:
    """Convert an exclusion entry to skims' explicit glob() syntax.

    Entries already written as ``glob(...)`` pass through. Anything else is
    treated as a literal path: ``**`` collapses to ``*`` and every remaining
    ``*`` is escaped as ``[*]`` before wrapping.

    Examples:
        "dist"             -> "glob(dist)"
        "glob(**/x/**)"    -> "glob(**/x/**)"
        "**/*.log"         -> "glob([*]/[*].log)"
    """
    trimmed = entry.strip()
    if trimmed.lower().startswith("glob(") and trimmed.endswith(")"):
        return trimmed
    escaped = trimmed.replace("**", "*").replace("*", "[*]")
    return f"glob({escaped})"


def load_base_config(path: Path = BASE_CONFIG_PATH) -> Dict[str, Any]:
    """Read the bundled skims base config.

    Raises:
        BaseConfigError: If the file is missing, unparsable or not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise BaseConfigError(f"Bundled base config not found at {path}: {e}") from e
    except yaml.YAMLError as e:
        raise BaseConfigError(f"Invalid YAML in bundled base config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BaseConfigError(
            f"Bundled base config {path} must be a YAML mapping, got {type(data).__name__}"
        )
    return data


def merge_exclusions(base: Dict[str, Any], exclusions: Sequence[str]) -> Dict[str, Any]:
    """Return a copy of base with project exclusions and fixed output settings.

    The base document is never modified. ``sast.exclude`` is replaced by the
    normalized exclusions in their original order (no dedup), and the output
    section is pointed at the fixed in-container CSV path.
    """
    merged = copy.deepcopy(base)

    sast = merged.get("sast")
    if not isinstance(sast, dict):
        sast = {}
        merged["sast"] = sast
    sast["exclude"] = [normalize_exclude_entry(entry) for entry in exclusions]

    output = merged.get("output")
    if not isinstance(output, dict):
        output = {}
        merged["output"] = output
    output["file_path"] = f"{CONTAINER_OUTPUT_DIR}/{RESULTS_FILE_NAME}"
    output["format"] = RESULTS_FORMAT

    return merged


def write_merged_config(merged: Dict[str, Any]) -> Path:
    """Write merged config into a fresh temporary directory and return the file path."""
    temp_dir = Path(tempfile.mkdtemp(prefix=MERGED_CONFIG_DIR_PREFIX))
    config_path = temp_dir / MERGED_CONFIG_FILE_NAME
    try:
        content = yaml.safe_dump(merged, sort_keys=False)
        config_path.write_text(content, encoding="utf-8")
    except (OSError, yaml.YAMLError):
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise
    LOGGER.debug(f"Created temporary merged Fluid Attacks config at: {config_path}")
    LOGGER.debug(f"---\n{content}===")
    return config_path


def create_merged_config_file(
    exclusions: Sequence[str],
    base_config_path: Path = BASE_CONFIG_PATH,
) -> Path:
    """Merge exclusions into the bundled base config and write it to a temp file."""
    base = load_base_config(base_config_path)
    return write_merged_config(merge_exclusions(base, exclusions))


def remove_merged_config(config_path: Path) -> None:
    """Delete the temporary directory holding a merged config."""
    temp_dir = config_path.parent
    try:
        shutil.rmtree(temp_dir)
        LOGGER.debug(f"Cleaned up Fluid Attacks temporary config directory: {temp_dir}")
    except FileNotFoundError:
        pass
    except OSError as e:
        LOGGER.warning(
            f"Could not clean up temporary directory {temp_dir}: {e}. "
            "You may need to remove it manually."
        )


@contextmanager
def merged_config_file(
    exclusions: Sequence[str],
    base_config_path: Path = BASE_CONFIG_PATH,
) -> Iterator[Path]:
    """Provide a merged config file that is removed on exit, whatever happens."""
    config_path = create_merged_config_file(exclusions, base_config_path)
    try:
        yield config_path
    finally:
        remove_merged_config(config_path)


def summarize_artifact(content: str) -> ArtifactSummary:
    """Summarise a result CSV by marker string and line count."""
    if NO_ISSUES_MARKER in content:
        return ArtifactSummary(no_issues_marker=True, issue_count=0)
    lines = [line for line in content.splitlines() if line.strip()]
    issue_count = len(lines) - 1 if len(lines) > 1 else 0
    return ArtifactSummary(no_issues_marker=False, issue_count=issue_count)


def timestamped_results_name(now: Optional[datetime] = None) -> str:
    """Return ``Fluid-Attacks-Results-<YYYYMMDDHHMMSS>.csv`` for the given (UTC) time."""
    moment = now or datetime.now(timezone.utc)
    return f"{RESULTS_FILE_PREFIX}-{moment.strftime('%Y%m%d%H%M%S')}.csv"


class FluidAttacksEngine:
    """Runs Fluid Attacks' skims CLI in Docker.

    The container sees three mounts: the project (read-only) at
    /scan-target, the output directory at /scan-output, and the merged
    config (read-only) at /temp-merged-config/config.yaml.
    """

    def __init__(
        self,
        image: Optional[str] = None,
        base_config_path: Path = BASE_CONFIG_PATH,
    ) -> None:
        self._image = image or os.environ.get(IMAGE_ENV) or DEFAULT_IMAGE
        self._base_config_path = base_config_path

    @property
    def name(self) -> str:
        return "fluid-attacks"

    @property
    def image(self) -> str:
        return self._image

    def build_command(
        self,
        project_root: Path,
        output_dir: Path,
        merged_config_path: Path,
    ) -> List[str]:
        return [
            "docker", "run", "--rm",
            "-v", f"{project_root}:{CONTAINER_TARGET_DIR}:ro",
            "-v", f"{output_dir}:{CONTAINER_OUTPUT_DIR}",
            "-v", f"{merged_config_path}:{CONTAINER_CONFIG_PATH}:ro",
            self._image,
            "skims", "scan", CONTAINER_CONFIG_PATH,
        ]

    def scan(
        self,
        project_root: Path,
        output_dir: Path,
        exclusions: Sequence[str],
    ) -> Optional[Path]:
        """Run the scan and return the (renamed) result artifact, if any.

        Args:
            project_root: Absolute path of the project to scan.
            output_dir: Existing absolute directory receiving the CSV.
            exclusions: Project exclusion entries (plain paths or glob()).

        Returns:
            Path of the result CSV, or None if skims produced none.

        Raises:
            BaseConfigError: If the bundled base config cannot be read.
            ScanExecutionError: If docker cannot be started or exits non-zero.
        """
        with merged_config_file(exclusions, self._base_config_path) as merged_path:
            cmd = self.build_command(project_root, output_dir, merged_path)

            LOGGER.info("Running Fluid Attacks Docker container...")
            LOGGER.info(f"Executing: {' '.join(cmd)}")

            try:
                subprocess.run(cmd, check=True)
            except subprocess.CalledProcessError as e:
                raise ScanExecutionError(
                    f"Fluid Attacks container exited with code {e.returncode}. "
                    f"Please ensure Docker is running and the image {self._image} is available.",
                    returncode=e.returncode,
                ) from e
            except OSError as e:
                raise ScanExecutionError(
                    f"Could not start Docker: {e}. Please ensure Docker is installed."
                ) from e

            return self._collect_artifact(output_dir)

    def _collect_artifact(self, output_dir: Path) -> Optional[Path]:
        """Rename the fixed-name result CSV so later runs do not overwrite it."""
        original_path = output_dir / RESULTS_FILE_NAME
        if not original_path.exists():
            LOGGER.warning(
                f"Expected results file '{RESULTS_FILE_NAME}' not found in {output_dir}. "
                "The scan may have failed or produced no CSV output. Check Docker logs above."
            )
            return None

        new_path = output_dir / timestamped_results_name()
        try:
            original_path.rename(new_path)
        except OSError as e:
            LOGGER.warning(f"Error renaming results file '{original_path}' to '{new_path}': {e}")
            return original_path

        LOGGER.info(f"Results file renamed to: {new_path}")
        return new_path
