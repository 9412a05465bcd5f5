"""Scan orchestration.

Finds the project root, loads ``securethis_config.py``, prepares the output
directory, runs the Fluid Attacks engine and summarises its CSV result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from securethis.config.loader import load_config
from securethis.core.logging import get_logger
from securethis.core.models import ArtifactSummary, ScanOptions, ScanResult
from securethis.core.paths import find_project_root
from securethis.engines.fluid_attacks import FluidAttacksEngine, summarize_artifact

LOGGER = get_logger(__name__)

__all__ = ["ScanOptions", "ScanResult", "security_scan"]


def resolve_output_dir(project_root: Path, output_dir_relative: str) -> Path:
    """Resolve and create (with parents) the results directory."""
    output_dir = (project_root / output_dir_relative).resolve()
    if not output_dir.exists():
        LOGGER.info(f"Creating output directory: {output_dir}")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def read_artifact_summary(artifact_path: Path) -> Optional[ArtifactSummary]:
    try:
        content = artifact_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        LOGGER.warning(f"Could not read results file {artifact_path}: {e}")
        return None
    return summarize_artifact(content)


def security_scan(
    options: Optional[ScanOptions] = None,
    engine: Optional[FluidAttacksEngine] = None,
) -> ScanResult:
    """Run the security scan over a code base.

    Uses ``securethis_config.py`` in the project root. If it does not exist
    yet, a default one is created and :class:`ConfigMissingError` is raised
    so it can be reviewed before the first scan.

    Args:
        options: Scan options; ``cwd`` sets where the project search starts.
        engine: Engine to run; defaults to Fluid Attacks with ``options.image``.

    Returns:
        ScanResult with the output directory and the result artifact, if any.

    Raises:
        ProjectRootNotFoundError: No project manifest above ``cwd``.
        ConfigMissingError: Config file was just created.
        ConfigInvalidError: Config file is malformed.
        BaseConfigError: Bundled base config is missing or broken.
        ScanExecutionError: The container failed.
    """
    options = options or ScanOptions()
    cwd = Path(options.cwd) if options.cwd else Path.cwd()

    project_root = find_project_root(cwd)
    LOGGER.info(f"Project root found: {project_root}")

    settings = load_config(project_root, type_source=options.type_source)

    output_dir = resolve_output_dir(project_root, settings.output_dir_relative)
    LOGGER.info(f"Results will be saved to: {output_dir}")

    engine = engine or FluidAttacksEngine(image=options.image)
    artifact_path = engine.scan(project_root, output_dir, settings.sast_exclude)

    result = ScanResult(output_dir_absolute=output_dir, artifact_path=artifact_path)
    if artifact_path is not None:
        result.summary = read_artifact_summary(artifact_path)
    return result
