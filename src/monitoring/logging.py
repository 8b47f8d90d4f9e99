"""Structured logging configuration.

Everything goes to stdout as JSON. When a logs directory is configured, two
rotating files are added: ``errors.log`` for ERROR and above from any logger,
and ``detections.log`` for the detector's WARNING-level findings.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

import structlog

from src.config.settings import MonitoringConfig

DETECTION_LOGGER = "src.detection"
_ERROR_HANDLER = "price_watch_errors"
_DETECTION_HANDLER = "price_watch_detections"


def _rotating_handler(
    path: Path,
    name: str,
    level: int,
    monitoring: MonitoringConfig,
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=monitoring.error_log_max_bytes,
        backupCount=monitoring.error_log_backup_count,
        encoding="utf-8",
    )
    handler.set_name(name)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _replace_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    for existing in list(logger.handlers):
        if existing.get_name() == handler.get_name():
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)


def configure_logging(
    log_level: str = "INFO",
    logs_path: str | None = None,
    monitoring: MonitoringConfig | None = None,
) -> None:
    """Configure stdlib and structlog. Safe to call again; file handlers are replaced."""
    monitoring = monitoring or MonitoringConfig()
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )
    if logs_path:
        log_dir = Path(logs_path)
        log_dir.mkdir(parents=True, exist_ok=True)
        _replace_handler(
            logging.getLogger(),
            _rotating_handler(log_dir / "errors.log", _ERROR_HANDLER, logging.ERROR, monitoring),
        )
        _replace_handler(
            logging.getLogger(DETECTION_LOGGER),
            _rotating_handler(
                log_dir / "detections.log", _DETECTION_HANDLER, logging.WARNING, monitoring
            ),
        )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
