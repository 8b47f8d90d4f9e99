"""Prometheus metrics definitions."""

from __future__ import annotations

from typing import Iterable

from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server

from src.detection.activities import SuspiciousActivity
from src.detection.engine import CheaterDetector
from src.ledger.store import PriceLedger


class Metrics:
    """Expose ledger and detection metrics for monitoring."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        self.tracked_items = Gauge(
            "tracked_items", "Items currently held in the ledger", registry=self.registry
        )
        self.price_history_size = Gauge(
            "price_history_size", "Price observations recorded", registry=self.registry
        )
        self.activity_log_size = Gauge(
            "activity_log_size", "Suspicious activities in the log", registry=self.registry
        )

        self.suspicious_activities_total = Counter(
            "suspicious_activities_total",
            "Suspicious activities detected by type",
            ["activity_type"],
            registry=self.registry,
        )
        self.activities_purged_total = Counter(
            "activities_purged_total",
            "Suspicious activities removed by retention",
            registry=self.registry,
        )

    def start(self, port: int) -> None:
        start_http_server(port, registry=self.registry)

    def record_activities(self, activities: Iterable[SuspiciousActivity]) -> None:
        for activity in activities:
            self.suspicious_activities_total.labels(
                activity_type=activity.activity_type.value
            ).inc()

    def record_purge(self, removed: int) -> None:
        if removed > 0:
            self.activities_purged_total.inc(removed)

    def update_state(self, ledger: PriceLedger, detector: CheaterDetector) -> None:
        self.tracked_items.set(ledger.item_count)
        self.price_history_size.set(ledger.history_size)
        self.activity_log_size.set(detector.activity_count)
