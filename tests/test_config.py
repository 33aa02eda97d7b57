"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from clinicslots.adapters.json_loader import SAMPLE_DOCTORS_FILE
from clinicslots.config import AppConfig, DefaultsConfig


def test_defaults():
    config = AppConfig()

    assert config.defaults.appointment_duration_minutes == 30
    assert config.defaults.lookahead_days == 7
    assert config.data.doctors_file == SAMPLE_DOCTORS_FILE
    assert config.log_level == "WARNING"


def test_load_from_yaml_resolves_relative_data_paths(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "timezone: UTC\n"
        "log_level: info\n"
        "defaults:\n"
        "  appointment_duration_minutes: 15\n"
        "data:\n"
        "  doctors_file: data/doctors.json\n",
        encoding="utf-8",
    )

    config = AppConfig.load_from_yaml(config_path)

    assert config.timezone == "UTC"
    assert config.log_level == "INFO"
    assert config.defaults.appointment_duration_minutes == 15
    assert config.defaults.lookahead_days == 7
    assert config.data.doctors_file == tmp_path / "data" / "doctors.json"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "config.yaml")


def test_non_mapping_root_is_rejected(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(config_path)


def test_invalid_yaml_is_rejected(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("defaults: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(config_path)


@pytest.mark.parametrize("field", ["appointment_duration_minutes", "lookahead_days"])
def test_non_positive_defaults_are_rejected(field):
    with pytest.raises(ValidationError):
        DefaultsConfig(**{field: 0})


def test_unknown_timezone_is_rejected():
    with pytest.raises(ValidationError):
        AppConfig(timezone="Mars/Olympus_Mons")


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        AppConfig(log_level="LOUD")
