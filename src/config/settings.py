"""
Configuration management with Pydantic validation.

Loads settings from YAML config file and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DetectionConfig(BaseModel):
    """Detection reporting configuration. Rule thresholds are fixed in the detector."""

    high_severity_threshold: float = Field(default=50.0, ge=0.0)
    scan_rapid_transactions: bool = True


class RetentionConfig(BaseModel):
    """Activity log retention."""

    activity_max_age_hours: float = Field(default=24.0, gt=0.0, le=24 * 30)


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    logs_path: str = "./logs"


class MonitoringConfig(BaseModel):
    """Monitoring configuration."""

    metrics_port: int = Field(default=9090, ge=1024, le=65535)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    error_log_max_bytes: int = Field(default=5_000_000, ge=100_000, le=50_000_000)
    error_log_backup_count: int = Field(default=3, ge=1, le=20)


class Settings(BaseSettings):
    """Main application settings."""

    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    retention: RetentionConfig = Field(default_factory=RetentionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "env_nested_delimiter": "__",
        "populate_by_name": True,
    }


def load_settings(config_path: str | Path | None = None) -> Settings:
    """
    Load settings from YAML config file and environment variables.

    Priority (highest to lowest):
    1. Init values from the config file
    2. Environment variables
    3. Default values
    """
    config_data = {}

    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config.yaml")

    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            config_data = yaml.safe_load(f) or {}

    env_path = config_file.parent / ".env"
    return Settings(**config_data, _env_file=env_path)


def create_default_config(path: str | Path = "config.yaml") -> None:
    """Create a default configuration file."""
    default_config = {
        "detection": {
            "high_severity_threshold": 50.0,
            "scan_rapid_transactions": True,
        },
        "retention": {
            "activity_max_age_hours": 24.0,
        },
        "storage": {
            "logs_path": "./logs",
        },
        "monitoring": {
            "metrics_port": 9090,
            "log_level": "INFO",
            "error_log_max_bytes": 5000000,
            "error_log_backup_count": 3,
        },
    }

    with open(path, "w") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)
