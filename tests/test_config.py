"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from salonbook.config import AppConfig, load_config


def _write(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(text, encoding="utf-8")
    return config_path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        """Defaults match the booking engine's built-in values."""
        config = AppConfig()

        assert config.slot_interval_minutes == 30
        assert config.default_service_duration_minutes == 60
        assert config.log_level == "INFO"
        assert config.data_file is None

    def test_load_from_yaml(self, tmp_path):
        """Values from YAML override the defaults."""
        config_path = _write(
            tmp_path,
            "slot_interval_minutes: 15\n"
            "timezone: Europe/Berlin\n"
            "log_level: debug\n",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.slot_interval_minutes == 15
        assert config.timezone == "Europe/Berlin"
        assert config.log_level == "DEBUG"

    def test_relative_data_file_resolves_next_to_config(self, tmp_path):
        """data_file paths are relative to the config file."""
        config_path = _write(tmp_path, "data_file: data.json\n")

        config = AppConfig.load_from_yaml(config_path)

        assert config.data_file == (tmp_path / "data.json").resolve()

    @pytest.mark.parametrize("text", ["slot_interval_minutes: 0\n", "log_level: LOUD\n"])
    def test_invalid_values(self, tmp_path, text):
        """Out-of-range values are rejected."""
        with pytest.raises(PydanticValidationError):
            AppConfig.load_from_yaml(_write(tmp_path, text))

    def test_missing_file(self, tmp_path):
        """An explicit missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML raises ValueError."""
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "slot_interval_minutes: [30\n"))

    def test_non_mapping_root(self, tmp_path):
        """The YAML root must be a mapping."""
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(_write(tmp_path, "- 30\n- 60\n"))

    def test_load_config_without_file_uses_defaults(self, tmp_path, monkeypatch):
        """With no config.yaml anywhere the defaults apply."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("salonbook.config.get_default_config_path", lambda: tmp_path / "config.yaml")

        assert load_config() == AppConfig()
