"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Configuration loading with priority (CLI > env > config)
- Selection flags applied through the coordinator
- Exit code handling for configuration and ingestion errors
"""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from salary_explorer.config.environment import EnvironmentConfig
from salary_explorer.config.models import AppConfig
from salary_explorer.main import load_runtime_config, main

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep environment variables and root logger changes out of other tests."""
    for name in ("DATASET_PATH", "LOG_LEVEL", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)

    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def config_file(tmp_path):
    """Config pointing at the sample dataset by absolute path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
dataset:
  path: {(FIXTURES_DIR / "sample_jobs.csv").as_posix()}
ingestion:
  timeout_seconds: 5
  poll_interval_seconds: 0.01
logging:
  level: WARNING
"""
    )
    return path


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def _loaded(self, log_level=None):
        app_config = AppConfig.model_validate(
            {"dataset": {"path": "config.csv"}, "logging": {"level": "ERROR"}}
        )
        return app_config, EnvironmentConfig(log_level=log_level)

    def test_log_level_from_config(self, tmp_path):
        with patch("salary_explorer.main.load_config") as mock_load:
            mock_load.return_value = self._loaded()
            _, env_config = load_runtime_config(tmp_path / "config.yaml")

        assert env_config.log_level == "ERROR"

    def test_env_log_level_beats_config(self, tmp_path):
        with patch("salary_explorer.main.load_config") as mock_load:
            mock_load.return_value = self._loaded(log_level="DEBUG")
            _, env_config = load_runtime_config(tmp_path / "config.yaml")

        assert env_config.log_level == "DEBUG"

    def test_cli_log_level_beats_env(self, tmp_path):
        with patch("salary_explorer.main.load_config") as mock_load:
            mock_load.return_value = self._loaded(log_level="DEBUG")
            _, env_config = load_runtime_config(tmp_path / "config.yaml", log_level_override="WARNING")

        assert env_config.log_level == "WARNING"

    def test_cli_dataset_override(self, tmp_path):
        with patch("salary_explorer.main.load_config") as mock_load:
            mock_load.return_value = self._loaded()
            app_config, _ = load_runtime_config(tmp_path / "config.yaml", dataset_override="cli.csv")

        assert app_config.dataset.path == "cli.csv"


class TestMain:
    """Test suite for main() CLI runs."""

    def test_national_view(self, config_file, capsys):
        exit_code = main(["--config", str(config_file)])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["national_median"] == 120000.0
        assert summary["dropped_records"] == 2
        assert [s["region"] for s in summary["region_statistics"]] == ["CA", "NY", "WA"]
        assert summary["selection"]["breadcrumb"] == "Select a state"
        assert summary["filtered_count"] == 6

    def test_region_and_track_selection(self, config_file, capsys):
        exit_code = main(
            ["--config", str(config_file), "--region", "CA", "--track", "DataScientist", "--size", "Small"]
        )

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["selection"] == {
            "region": "CA",
            "track": "DataScientist",
            "size": "Small",
            "breadcrumb": "CA → Data Scientist",
        }
        assert summary["filtered_count"] == 1
        assert summary["skill_frequency"]["Cloud"] == 1.0
        assert [s["bucket"] for s in summary["size_stats"]] == ["Small"]
        # Flow graph stays scoped to the region
        assert len(summary["flow_graph"]["nodes"]) == 13
        assert {"source": 6, "target": 12, "weight": 1, "mean_salary": 140000.0} in summary["flow_graph"]["links"]

    def test_track_without_region_is_ignored(self, config_file, capsys):
        exit_code = main(["--config", str(config_file), "--track", "DataEngineer"])

        assert exit_code == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["selection"]["track"] is None
        assert summary["filtered_count"] == 6

    def test_missing_config_file(self, tmp_path, capsys):
        exit_code = main(["--config", str(tmp_path / "missing.yaml")])

        assert exit_code == 1
        assert "Configuration Error" in capsys.readouterr().err

    def test_missing_dataset(self, config_file, tmp_path, capsys):
        exit_code = main(["--config", str(config_file), "--dataset", str(tmp_path / "missing.csv")])

        assert exit_code == 1
        assert "Ingestion Error" in capsys.readouterr().err

    def test_dataset_from_environment(self, config_file, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("DATASET_PATH", str(tmp_path / "missing.csv"))

        assert main(["--config", str(config_file)]) == 1

    def test_invalid_track_choice(self, config_file):
        with pytest.raises(SystemExit):
            main(["--config", str(config_file), "--track", "Astronaut"])
