"""Unit tests for the Fluid Attacks engine."""

from __future__ import annotations

import copy
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from securethis.core.errors import BaseConfigError, ScanExecutionError
from securethis.engines.fluid_attacks import (
    BASE_CONFIG_PATH,
    DEFAULT_IMAGE,
    IMAGE_ENV,
    MERGED_CONFIG_DIR_PREFIX,
    NO_ISSUES_MARKER,
    RESULTS_FILE_NAME,
    FluidAttacksEngine,
    load_base_config,
    merge_exclusions,
    merged_config_file,
    normalize_exclude_entry,
    summarize_artifact,
    timestamped_results_name,
    write_merged_config,
)


@pytest.fixture
def base_config() -> dict:
    return {
        "namespace": "demo",
        "output": {"file_path": "/elsewhere/out.json", "format": "SARIF"},
        "sast": {"include": ["."], "exclude": ["glob(old)"]},
    }


# --- Exclusion normalization ---


class TestNormalizeExcludeEntry:
    def test_plain_path_is_wrapped(self) -> None:
        assert normalize_exclude_entry("a/b") == "glob(a/b)"

    def test_existing_glob_is_untouched(self) -> None:
        assert normalize_exclude_entry("glob(**/x/**)") == "glob(**/x/**)"

    def test_whitespace_is_trimmed(self) -> None:
        assert normalize_exclude_entry("  c  ") == "glob(c)"
        assert normalize_exclude_entry(" glob(**/d/**) ") == "glob(**/d/**)"

    def test_glob_prefix_is_case_insensitive(self) -> None:
        assert normalize_exclude_entry("GLOB(**/e/**)") == "GLOB(**/e/**)"

    def test_unclosed_glob_is_treated_as_literal(self) -> None:
        assert normalize_exclude_entry("glob(f") == "glob(glob(f)"

    def test_wildcards_in_literal_paths_are_escaped(self) -> None:
        assert normalize_exclude_entry("**/*.log") == "glob([*]/[*].log)"
        assert normalize_exclude_entry("a/***/b") == "glob(a/[*][*]/b)"


# --- Merge ---


class TestMergeExclusions:
    def test_mixed_entries(self, base_config: dict) -> None:
        merged = merge_exclusions(base_config, ["a/b", "glob(**/x/**)", "  c  "])
        assert merged["sast"]["exclude"] == ["glob(a/b)", "glob(**/x/**)", "glob(c)"]

    def test_base_is_not_mutated(self, base_config: dict) -> None:
        snapshot = copy.deepcopy(base_config)
        merged = merge_exclusions(base_config, ["dist"])
        assert base_config == snapshot
        assert merged["sast"] is not base_config["sast"]

    def test_order_and_duplicates_preserved(self, base_config: dict) -> None:
        merged = merge_exclusions(base_config, ["b", "a", "b"])
        assert merged["sast"]["exclude"] == ["glob(b)", "glob(a)", "glob(b)"]

    def test_other_sast_keys_are_kept(self, base_config: dict) -> None:
        merged = merge_exclusions(base_config, [])
        assert merged["sast"]["include"] == ["."]
        assert merged["sast"]["exclude"] == []
        assert merged["namespace"] == "demo"

    def test_missing_sections_are_created(self) -> None:
        merged = merge_exclusions({"namespace": "demo"}, ["dist"])
        assert merged["sast"] == {"exclude": ["glob(dist)"]}
        assert merged["output"] == {
            "file_path": f"/scan-output/{RESULTS_FILE_NAME}",
            "format": "CSV",
        }

    def test_output_is_forced(self, base_config: dict) -> None:
        merged = merge_exclusions(base_config, [])
        assert merged["output"]["file_path"] == "/scan-output/Fluid-Attacks-Results.csv"
        assert merged["output"]["format"] == "CSV"


# --- Base config ---


class TestLoadBaseConfig:
    def test_bundled_base_config_loads(self) -> None:
        base = load_base_config()
        assert BASE_CONFIG_PATH.name == "base-fluid-attacks-config.yaml"
        assert "sast" in base
        assert "output" in base

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(BaseConfigError, match="not found"):
            load_base_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "base.yaml"
        path.write_text("sast: [unclosed\n")
        with pytest.raises(BaseConfigError, match="Invalid YAML"):
            load_base_config(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "base.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(BaseConfigError, match="must be a YAML mapping"):
            load_base_config(path)

    def test_empty_file_is_empty_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "base.yaml"
        path.write_text("")
        assert load_base_config(path) == {}


# --- Temporary merged config ---


class TestMergedConfigFile:
    def test_write_merged_config(self, base_config: dict) -> None:
        path = write_merged_config(base_config)
        try:
            assert path.parent.name.startswith(MERGED_CONFIG_DIR_PREFIX)
            assert yaml.safe_load(path.read_text()) == base_config
        finally:
            path.unlink()
            path.parent.rmdir()

    def test_failed_write_removes_directory(self, tmp_path: Path) -> None:
        temp_dir = tmp_path / "merged"
        temp_dir.mkdir()
        with patch(
            "securethis.engines.fluid_attacks.tempfile.mkdtemp",
            return_value=str(temp_dir),
        ):
            with pytest.raises(yaml.YAMLError):
                write_merged_config({"sast": object()})
        assert not temp_dir.exists()

    def test_context_manager_removes_directory(self) -> None:
        with merged_config_file(["dist"]) as path:
            assert path.exists()
            merged = yaml.safe_load(path.read_text())
            assert merged["sast"]["exclude"] == ["glob(dist)"]
        assert not path.parent.exists()

    def test_context_manager_removes_directory_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with merged_config_file(["dist"]) as path:
                raise RuntimeError("boom")
        assert not path.parent.exists()

    def test_broken_base_config_creates_nothing(self, tmp_path: Path) -> None:
        with pytest.raises(BaseConfigError):
            with merged_config_file(["dist"], tmp_path / "missing.yaml"):
                pytest.fail("should not be reached")


# --- Artifact helpers ---


class TestSummarizeArtifact:
    def test_marker_means_clean(self) -> None:
        summary = summarize_artifact(f"title,cwe\n{NO_ISSUES_MARKER}\n")
        assert summary.clean
        assert summary.issue_count == 0

    def test_counts_non_header_lines(self) -> None:
        summary = summarize_artifact("title,cwe\nsqli,89\n\nxss,79\n")
        assert not summary.clean
        assert summary.issue_count == 2
        assert not summary.undetermined

    def test_header_only_is_undetermined(self) -> None:
        summary = summarize_artifact("title,cwe\n")
        assert summary.issue_count == 0
        assert summary.undetermined

    def test_timestamped_name(self) -> None:
        moment = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert timestamped_results_name(moment) == "Fluid-Attacks-Results-20240102030405.csv"


# --- Engine ---


class TestFluidAttacksEngine:
    def test_default_image(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(IMAGE_ENV, raising=False)
        assert FluidAttacksEngine().image == DEFAULT_IMAGE

    def test_image_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(IMAGE_ENV, "fluidattacks/cli:arm64")
        assert FluidAttacksEngine().image == "fluidattacks/cli:arm64"
        assert FluidAttacksEngine(image="custom:1").image == "custom:1"

    def test_build_command(self, tmp_path: Path) -> None:
        engine = FluidAttacksEngine(image="img:tag")
        cmd = engine.build_command(tmp_path / "p", tmp_path / "o", tmp_path / "c.yaml")
        assert cmd == [
            "docker", "run", "--rm",
            "-v", f"{tmp_path / 'p'}:/scan-target:ro",
            "-v", f"{tmp_path / 'o'}:/scan-output",
            "-v", f"{tmp_path / 'c.yaml'}:/temp-merged-config/config.yaml:ro",
            "img:tag",
            "skims", "scan", "/temp-merged-config/config.yaml",
        ]

    def test_scan_renames_artifact(self, tmp_path: Path, fake_docker) -> None:
        docker = fake_docker(csv_content="title\nsqli\n")
        engine = FluidAttacksEngine(image="img")

        with patch("securethis.engines.fluid_attacks.subprocess.run", side_effect=docker):
            artifact = engine.scan(tmp_path, tmp_path, ["dist", "**/*.log"])

        assert artifact is not None
        assert artifact.parent == tmp_path
        assert artifact.name.startswith("Fluid-Attacks-Results-")
        assert len(artifact.name) == len("Fluid-Attacks-Results-YYYYMMDDHHMMSS.csv")
        assert artifact.read_text() == "title\nsqli\n"
        assert not (tmp_path / RESULTS_FILE_NAME).exists()

        merged = yaml.safe_load(docker.merged_config_text)
        assert merged["sast"]["exclude"] == ["glob(dist)", "glob([*]/[*].log)"]
        assert not docker.merged_config_path.parent.exists()

    def test_scan_without_artifact_returns_none(self, tmp_path: Path, fake_docker) -> None:
        docker = fake_docker()
        with patch("securethis.engines.fluid_attacks.subprocess.run", side_effect=docker):
            assert FluidAttacksEngine().scan(tmp_path, tmp_path, []) is None
        assert not docker.merged_config_path.parent.exists()

    def test_rename_failure_keeps_original(self, tmp_path: Path, fake_docker) -> None:
        docker = fake_docker(csv_content="title\n")
        with patch("securethis.engines.fluid_attacks.subprocess.run", side_effect=docker), \
                patch.object(Path, "rename", side_effect=OSError("read-only")):
            artifact = FluidAttacksEngine().scan(tmp_path, tmp_path, [])
        assert artifact == tmp_path / RESULTS_FILE_NAME

    def test_non_zero_exit_raises_and_cleans_up(self, tmp_path: Path, fake_docker) -> None:
        docker = fake_docker(returncode=125)
        with patch("securethis.engines.fluid_attacks.subprocess.run", side_effect=docker):
            with pytest.raises(ScanExecutionError) as exc_info:
                FluidAttacksEngine().scan(tmp_path, tmp_path, [])
        assert exc_info.value.returncode == 125
        assert isinstance(exc_info.value.__cause__, subprocess.CalledProcessError)
        assert not docker.merged_config_path.parent.exists()

    def test_missing_docker_raises(self, tmp_path: Path) -> None:
        with patch(
            "securethis.engines.fluid_attacks.subprocess.run",
            side_effect=FileNotFoundError("docker"),
        ):
            with pytest.raises(ScanExecutionError, match="Could not start Docker"):
                FluidAttacksEngine().scan(tmp_path, tmp_path, [])
