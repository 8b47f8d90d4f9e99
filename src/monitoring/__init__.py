"""Monitoring utilities."""

from src.monitoring.logging import configure_logging
from src.monitoring.metrics import Metrics

__all__ = ["configure_logging", "Metrics"]
