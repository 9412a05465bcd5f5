"""Shared fixtures for securethis unit tests."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from securethis.engines.fluid_attacks import (
    CONTAINER_CONFIG_PATH,
    CONTAINER_OUTPUT_DIR,
    RESULTS_FILE_NAME,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers configure_logging() bound to a since-closed captured stream."""
    yield
    logger = logging.getLogger("securethis")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A minimal project: a directory holding a pyproject.toml manifest."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "pyproject.toml").write_text("[project]\nname = 'example'\n")
    return root


def host_mount(cmd: List[str], container_path: str) -> Path:
    """Return the host side of the ``-v host:container[:ro]`` mount for container_path."""
    for arg in cmd:
        for suffix in (f":{container_path}:ro", f":{container_path}"):
            if arg.endswith(suffix):
                return Path(arg[: -len(suffix)])
    raise AssertionError(f"no mount for {container_path} in {cmd}")


class FakeDocker:
    """Stands in for ``subprocess.run`` of ``docker run``.

    Records calls, remembers where the merged config lived on the host,
    and optionally writes a result CSV into the mounted output directory.
    """

    def __init__(
        self,
        csv_content: Optional[str] = None,
        returncode: int = 0,
        on_call: Optional[Callable[[List[str]], None]] = None,
    ) -> None:
        self.csv_content = csv_content
        self.returncode = returncode
        self.on_call = on_call
        self.calls: List[List[str]] = []
        self.merged_config_path: Optional[Path] = None
        self.merged_config_text: Optional[str] = None

    def __call__(self, cmd: List[str], check: bool = False, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(cmd)
        self.merged_config_path = host_mount(cmd, CONTAINER_CONFIG_PATH)
        self.merged_config_text = self.merged_config_path.read_text()
        if self.on_call:
            self.on_call(cmd)
        if self.csv_content is not None:
            output_dir = host_mount(cmd, CONTAINER_OUTPUT_DIR)
            (output_dir / RESULTS_FILE_NAME).write_text(self.csv_content)
        if check and self.returncode != 0:
            raise subprocess.CalledProcessError(self.returncode, cmd)
        return subprocess.CompletedProcess(args=cmd, returncode=self.returncode)


@pytest.fixture
def fake_docker() -> type:
    """The FakeDocker class; instantiate it with the behaviour a test needs."""
    return FakeDocker
