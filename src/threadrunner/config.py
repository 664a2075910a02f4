"""
Configuration management for Threadrunner

Provides environment-based configuration with sensible defaults, optionally
overlaid with a YAML config file.
"""

import copy
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from threadrunner.core.errors import ConfigurationError

DEFAULT_CONFIG_FILE = Path.home() / ".threadrunner" / "config.yaml"


@dataclass
class RunnerConfig:
    """Configuration for a task run"""

    # Input
    task_file: str = "threads.csv"

    # Execution; 1.0 means task durations are real seconds
    time_scale: float = 1.0

    # Output
    timestamps: bool = True

    # Logging
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Load configuration from environment variables"""
        self.task_file = os.getenv("THREADRUNNER_TASK_FILE", self.task_file)
        time_scale = os.getenv("THREADRUNNER_TIME_SCALE")
        if time_scale is not None:
            try:
                self.time_scale = float(time_scale)
            except ValueError as e:
                raise ConfigurationError(
                    f"THREADRUNNER_TIME_SCALE must be a number, got {time_scale!r}", cause=e
                ) from e
        timestamps = os.getenv("THREADRUNNER_TIMESTAMPS")
        if timestamps is not None:
            self.timestamps = timestamps.lower() in ("true", "1", "yes")
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "task_file": self.task_file,
            "time_scale": self.time_scale,
            "timestamps": self.timestamps,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunnerConfig":
        """Create configuration from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def merged(self, **overrides: Any) -> "RunnerConfig":
        """Return a copy with the non-None overrides applied"""
        config = copy.copy(self)
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config

    def validate(self) -> bool:
        """Validate configuration"""
        if not self.task_file:
            raise ConfigurationError("task_file is required")

        if not isinstance(self.time_scale, (int, float)) or isinstance(self.time_scale, bool):
            raise ConfigurationError(f"time_scale must be a number, got {self.time_scale!r}")

        if self.time_scale < 0:
            raise ConfigurationError("time_scale must be non-negative")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

        return True


def load_config(config_file: Optional[Union[str, Path]] = None) -> RunnerConfig:
    """
    Load configuration from a YAML file.

    Without an explicit path, ``~/.threadrunner/config.yaml`` is used when it
    exists; otherwise defaults (plus environment overrides) apply.
    """
    path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    if not path.exists():
        if config_file:
            raise ConfigurationError(f"Config file not found: {config_file}")
        return RunnerConfig()

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    return RunnerConfig.from_dict(data)


def setup_logging(config: RunnerConfig):
    """Setup logging based on configuration"""
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format=config.log_format,
    )

    if config.log_level.upper() == "DEBUG":
        logging.getLogger("threadrunner").setLevel(logging.DEBUG)
