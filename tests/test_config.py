"""
Tests for runner configuration
"""

import pytest

from threadrunner.config import RunnerConfig, load_config
from threadrunner.core.errors import ConfigurationError


class TestRunnerConfig:
    """Test defaults, environment overrides and validation"""

    def test_defaults(self, monkeypatch):
        for name in ("THREADRUNNER_TASK_FILE", "THREADRUNNER_TIME_SCALE", "THREADRUNNER_TIMESTAMPS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = RunnerConfig()

        assert config.task_file == "threads.csv"
        assert config.time_scale == 1.0
        assert config.timestamps is True
        assert config.validate()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("THREADRUNNER_TASK_FILE", "other.csv")
        monkeypatch.setenv("THREADRUNNER_TIME_SCALE", "0.5")
        monkeypatch.setenv("THREADRUNNER_TIMESTAMPS", "no")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        config = RunnerConfig()

        assert config.task_file == "other.csv"
        assert config.time_scale == 0.5
        assert config.timestamps is False
        assert config.log_level == "DEBUG"

    def test_merged_ignores_none(self):
        config = RunnerConfig().merged(task_file=None, time_scale=0.25)

        assert config.time_scale == 0.25
        assert config.task_file == RunnerConfig().task_file

    @pytest.mark.parametrize("overrides", [
        {"time_scale": -1.0},
        {"task_file": ""},
        {"log_level": "CHATTY"},
    ])
    def test_validate_rejects_bad_values(self, overrides):
        with pytest.raises(ConfigurationError):
            RunnerConfig().merged(**overrides).validate()

    def test_non_numeric_time_scale_env_is_a_configuration_error(self, monkeypatch):
        monkeypatch.setenv("THREADRUNNER_TIME_SCALE", "fast")
        with pytest.raises(ConfigurationError) as exc_info:
            RunnerConfig()
        assert "THREADRUNNER_TIME_SCALE" in str(exc_info.value)

    def test_unknown_log_level_env_fails_validation(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(ConfigurationError):
            RunnerConfig().validate()

    def test_non_numeric_time_scale_from_file_fails_validation(self, monkeypatch):
        monkeypatch.delenv("THREADRUNNER_TIME_SCALE", raising=False)
        with pytest.raises(ConfigurationError):
            RunnerConfig.from_dict({"time_scale": "fast"}).validate()

    def test_to_dict_roundtrip(self, monkeypatch):
        monkeypatch.delenv("THREADRUNNER_TIME_SCALE", raising=False)
        config = RunnerConfig.from_dict({"time_scale": 0.1, "unknown": True})
        assert config.to_dict()["time_scale"] == 0.1


class TestLoadConfig:
    """Test YAML config loading"""

    def test_loads_yaml(self, temp_dir, monkeypatch):
        monkeypatch.delenv("THREADRUNNER_TIME_SCALE", raising=False)
        monkeypatch.delenv("THREADRUNNER_TASK_FILE", raising=False)
        path = temp_dir / "config.yaml"
        path.write_text("time_scale: 0.01\ntask_file: jobs.csv\n")

        config = load_config(path)

        assert config.time_scale == 0.01
        assert config.task_file == "jobs.csv"

    def test_explicit_missing_file_is_an_error(self, temp_dir):
        with pytest.raises(ConfigurationError):
            load_config(temp_dir / "missing.yaml")

    def test_non_mapping_is_an_error(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            load_config(path)
