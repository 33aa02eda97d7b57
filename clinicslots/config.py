"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator

from .adapters.json_loader import SAMPLE_DOCTORS_FILE, SAMPLE_SLOTS_FILE


class DefaultsConfig(BaseModel):
    """Default settings for availability lookups."""
    appointment_duration_minutes: int = 30
    lookahead_days: int = 7

    @field_validator("appointment_duration_minutes", "lookahead_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations and windows are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value


class DataConfig(BaseModel):
    """Locations of the doctor and slot fixtures."""
    doctors_file: Path = SAMPLE_DOCTORS_FILE
    slots_file: Path = SAMPLE_SLOTS_FILE

    def resolve(self, base_dir: Path) -> "DataConfig":
        """Resolve relative paths against the config file's directory."""
        return DataConfig(
            doctors_file=self.doctors_file if self.doctors_file.is_absolute() else base_dir / self.doctors_file,
            slots_file=self.slots_file if self.slots_file.is_absolute() else base_dir / self.slots_file,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Europe/Berlin"  # only used to resolve "today"
    log_level: str = "WARNING"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    data: DataConfig = Field(default_factory=DataConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Ensure the log level is a standard level name."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

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
        config.data = config.data.resolve(config_path.parent)
        return config

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """Load from ``config_path`` or the default location, falling back to built-in defaults."""
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
