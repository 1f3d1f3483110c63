"""
Configuration management using Pydantic models loaded from YAML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.slot_grid import DEFAULT_STEP_MINUTES


class SchedulingConfig(BaseModel):
    """Policy settings of the availability engine."""
    slot_step_minutes: int = DEFAULT_STEP_MINUTES
    default_duration_minutes: int = 30
    hide_past_slots: bool = True

    @field_validator("slot_step_minutes")
    @classmethod
    def validate_step(cls, value: int) -> int:
        """Ensure the grid step is a sensible number of minutes."""
        if not 1 <= value <= 240:
            raise ValueError(f"slot_step_minutes must be between 1 and 240, got {value}")
        return value

    @field_validator("default_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure the default service duration is positive."""
        if value <= 0:
            raise ValueError("default_duration_minutes must be greater than zero")
        return value


class DataSourceConfig(BaseModel):
    """Where staff calendars, appointments and blocks are read from."""
    kind: Literal["json", "http"] = "json"
    path: Optional[Path] = None
    base_url: Optional[str] = None
    timeout_seconds: float = 10.0

    @model_validator(mode="after")
    def validate_location(self) -> "DataSourceConfig":
        """Ensure the selected source has a location."""
        if self.kind == "json" and self.path is None:
            raise ValueError("data_source.path is required for the json source")
        if self.kind == "http" and not self.base_url:
            raise ValueError("data_source.base_url is required for the http source")
        if self.timeout_seconds <= 0:
            raise ValueError("data_source.timeout_seconds must be greater than zero")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    data_source: DataSourceConfig = Field(
        default_factory=lambda: DataSourceConfig(path=Path("schedule_data.json"))
    )
    timezone: str = "UTC"
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the canonical clock is a known IANA timezone."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log_level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Relative data file paths are resolved against the config file's directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        data_path = config.data_source.path
        if data_path is not None and not data_path.is_absolute():
            config.data_source.path = config_path.parent / data_path

        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
