"""Record item updates and run detection in one call."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import structlog

from src.config.settings import Settings, load_settings
from src.detection.activities import SuspiciousActivity
from src.detection.engine import CheaterDetector
from src.ledger.store import PriceLedger
from src.models import InventoryItem
from src.monitoring.logging import configure_logging
from src.monitoring.metrics import Metrics
from src.utils.clock import resolve_now

log = structlog.get_logger(__name__)


class PriceWatch:
    """Wire a ledger, a detector and metrics together."""

    def __init__(self, settings: Settings | None = None, metrics: Metrics | None = None) -> None:
        self.settings = settings or Settings()
        self.metrics = metrics or Metrics()
        self.ledger = PriceLedger()
        self.detector = CheaterDetector(self.ledger)

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> "PriceWatch":
        """Load settings, configure logging and build a watch from them."""
        settings = load_settings(config_path)
        configure_logging(
            settings.monitoring.log_level,
            settings.storage.logs_path,
            settings.monitoring,
        )
        log.info("price_watch_configured", config_path=str(config_path) if config_path else None)
        return cls(settings=settings)

    def record_update(
        self,
        item: InventoryItem,
        now: datetime | None = None,
    ) -> list[SuspiciousActivity]:
        """Upsert ``item``, analyze it, and optionally scan its owner for rapid updates."""
        now = resolve_now(now)
        self.ledger.upsert_item(item, now=now)
        activities = self.detector.analyze_item_update(item, now=now)
        if self.settings.detection.scan_rapid_transactions:
            rapid = self.detector.scan_rapid_transactions(item.owner, now=now)
            if rapid:
                activities.append(rapid)
        self.metrics.record_activities(activities)
        self.metrics.update_state(self.ledger, self.detector)
        return activities

    def purge_expired(self, now: datetime | None = None) -> int:
        max_age = timedelta(hours=self.settings.retention.activity_max_age_hours)
        removed = self.detector.clear_old_activities(max_age, now=now)
        self.metrics.record_purge(removed)
        self.metrics.update_state(self.ledger, self.detector)
        log.info(
            "retention_sweep_completed",
            removed=removed,
            max_age_hours=self.settings.retention.activity_max_age_hours,
        )
        return removed

    def high_severity(self) -> list[SuspiciousActivity]:
        return self.detector.get_high_severity_activities(
            self.settings.detection.high_severity_threshold
        )
