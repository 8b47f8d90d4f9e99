from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from src.config.settings import Settings, create_default_config, load_settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.detection.high_severity_threshold == 50.0
    assert settings.detection.scan_rapid_transactions is True
    assert settings.retention.activity_max_age_hours == 24.0
    assert settings.monitoring.log_level == "INFO"


def test_default_config_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    create_default_config(path)
    settings = load_settings(path)
    assert settings.monitoring.metrics_port == 9090
    assert settings.storage.logs_path == "./logs"


def test_load_settings_reads_yaml_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump(
            {
                "detection": {"high_severity_threshold": 80, "scan_rapid_transactions": False},
                "retention": {"activity_max_age_hours": 6},
            }
        )
    )
    settings = load_settings(path)
    assert settings.detection.high_severity_threshold == 80
    assert settings.detection.scan_rapid_transactions is False
    assert settings.retention.activity_max_age_hours == 6


def test_missing_config_file_uses_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "absent.yaml")
    assert settings.retention.activity_max_age_hours == 24.0


def test_env_overrides_nested_values(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MONITORING__LOG_LEVEL", "DEBUG")
    settings = load_settings(tmp_path / "absent.yaml")
    assert settings.monitoring.log_level == "DEBUG"


def test_invalid_retention_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"retention": {"activity_max_age_hours": 0}}))
    with pytest.raises(ValidationError):
        load_settings(path)
