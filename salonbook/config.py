"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, field_validator

from .domain.models import DEFAULT_SERVICE_DURATION
from .domain.slot_generator import DEFAULT_SLOT_INTERVAL

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseModel):
    """Application configuration."""
    slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL
    default_service_duration_minutes: int = DEFAULT_SERVICE_DURATION
    timezone: str = "UTC"  # Only used to read the clock; hours stay naive
    log_level: str = "INFO"
    data_file: Optional[Path] = None

    @field_validator("slot_interval_minutes", "default_service_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure minute settings are positive."""
        if value <= 0:
            raise ValueError(f"Minute values must be greater than zero, got {value}")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone name is known."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
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

        # Relative data files are resolved against the config file location
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = (config_path.parent / config.data_file).resolve()

        return config


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


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the configuration, falling back to defaults.

    An explicitly given path must exist; the default location is optional.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()
