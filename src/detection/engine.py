"""Rule-based cheater detection over ledger price history."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable

import structlog

from src.detection.activities import (
    ActivityType,
    PriceManipulationContext,
    QuantityContext,
    RapidTransactionContext,
    SuspiciousActivity,
)
from src.ledger.store import PriceLedger
from src.models import InventoryItem
from src.utils.clock import ensure_utc, resolve_now


class CheaterDetector:
    """Evaluate item updates against fixed anomaly rules and keep a findings log."""

    EXTREME_PRICE_CHANGE_THRESHOLD = Decimal("0.5")
    RAPID_TRANSACTION_THRESHOLD = 10
    RAPID_TRANSACTION_WINDOW_SECONDS = 60
    HIGH_QUANTITY_THRESHOLD = 100_000

    def __init__(self, ledger: PriceLedger) -> None:
        self._ledger = ledger
        self._activities: list[SuspiciousActivity] = []
        self._lock = threading.Lock()
        self._log = structlog.get_logger(__name__)

    @property
    def activity_count(self) -> int:
        with self._lock:
            return len(self._activities)

    def analyze_item_update(
        self,
        item: InventoryItem,
        now: datetime | None = None,
    ) -> list[SuspiciousActivity]:
        """Run the price and quantity checks for an item already upserted into the ledger."""
        now = resolve_now(now)
        activities: list[SuspiciousActivity] = []

        price_activity = self._detect_price_manipulation(item, now)
        if price_activity:
            activities.append(price_activity)

        quantity_activity = self._detect_unrealistic_quantity(item, now)
        if quantity_activity:
            activities.append(quantity_activity)

        self._record(activities)
        return activities

    def detect_rapid_transactions(
        self,
        user_id: str,
        recent_items: Iterable[InventoryItem],
        now: datetime | None = None,
    ) -> SuspiciousActivity | None:
        """Flag ``user_id`` when too many of ``recent_items`` were updated inside the window."""
        now = resolve_now(now)
        cutoff = now - timedelta(seconds=self.RAPID_TRANSACTION_WINDOW_SECONDS)
        count = sum(
            1
            for item in recent_items
            if item.owner == user_id and ensure_utc(item.last_updated) >= cutoff
        )
        if count <= self.RAPID_TRANSACTION_THRESHOLD:
            return None

        activity = SuspiciousActivity(
            user_id=user_id,
            activity_type=ActivityType.RAPID_TRANSACTIONS,
            description=(
                f"Unusual transaction rate: {count} transactions in "
                f"{self.RAPID_TRANSACTION_WINDOW_SECONDS} seconds"
            ),
            severity=float(count * 5),
            context=RapidTransactionContext(
                transaction_count=count,
                window_seconds=self.RAPID_TRANSACTION_WINDOW_SECONDS,
            ),
            detected_at=now,
        )
        self._record([activity])
        return activity

    def scan_rapid_transactions(
        self,
        user_id: str,
        now: datetime | None = None,
    ) -> SuspiciousActivity | None:
        """Same check as ``detect_rapid_transactions`` using the ledger's own items.

        A burst is reported once: nothing new is logged while the user already
        has a rapid-transaction finding inside the current window.
        """
        now = resolve_now(now)
        since = now - timedelta(seconds=self.RAPID_TRANSACTION_WINDOW_SECONDS)
        with self._lock:
            already_flagged = any(
                a.user_id == user_id
                and a.activity_type == ActivityType.RAPID_TRANSACTIONS
                and since <= a.detected_at <= now
                for a in self._activities
            )
        if already_flagged:
            return None
        return self.detect_rapid_transactions(
            user_id, self._ledger.items_for_owner(user_id, since=since), now
        )

    def get_all_activities(self) -> list[SuspiciousActivity]:
        with self._lock:
            return sorted(self._activities, key=lambda a: a.detected_at, reverse=True)

    def get_user_activities(self, user_id: str) -> list[SuspiciousActivity]:
        with self._lock:
            return sorted(
                (a for a in self._activities if a.user_id == user_id),
                key=lambda a: a.detected_at,
                reverse=True,
            )

    def get_high_severity_activities(self, threshold: float = 50.0) -> list[SuspiciousActivity]:
        with self._lock:
            return sorted(
                (a for a in self._activities if a.severity >= threshold),
                key=lambda a: a.severity,
                reverse=True,
            )

    def clear_old_activities(self, max_age: timedelta, now: datetime | None = None) -> int:
        """Drop findings detected before ``now - max_age`` and return how many went."""
        now = resolve_now(now)
        cutoff = now - max_age
        with self._lock:
            kept = [a for a in self._activities if a.detected_at >= cutoff]
            removed = len(self._activities) - len(kept)
            self._activities = kept
        if removed:
            self._log.info("activities_purged", removed=removed, cutoff=cutoff.isoformat())
        return removed

    def _detect_price_manipulation(
        self,
        item: InventoryItem,
        now: datetime,
    ) -> SuspiciousActivity | None:
        history = self._ledger.get_price_history(item.id)
        if len(history) < 2:
            return None

        previous_price = history[-2].price
        current_price = item.current_price
        if previous_price == 0:
            return None

        change = abs(current_price - previous_price) / previous_price
        if change <= self.EXTREME_PRICE_CHANGE_THRESHOLD:
            return None

        return SuspiciousActivity(
            user_id=item.owner,
            activity_type=ActivityType.PRICE_MANIPULATION,
            description=(
                f"Extreme price change detected: {previous_price:.2f} -> "
                f"{current_price:.2f} ({float(change):.2%})"
            ),
            severity=float(change * 100),
            context=PriceManipulationContext(
                item_id=item.id,
                item_name=item.name,
                previous_price=previous_price,
                current_price=current_price,
                change_fraction=change,
            ),
            detected_at=now,
        )

    def _detect_unrealistic_quantity(
        self,
        item: InventoryItem,
        now: datetime,
    ) -> SuspiciousActivity | None:
        if item.quantity <= self.HIGH_QUANTITY_THRESHOLD:
            return None
        return SuspiciousActivity(
            user_id=item.owner,
            activity_type=ActivityType.UNREALISTIC_QUANTITY,
            description=(
                f"Extremely high quantity detected: {item.quantity} units of {item.name}"
            ),
            severity=min(100.0, item.quantity / 1000),
            context=QuantityContext(
                item_id=item.id,
                item_name=item.name,
                quantity=item.quantity,
            ),
            detected_at=now,
        )

    def _record(self, activities: list[SuspiciousActivity]) -> None:
        if not activities:
            return
        with self._lock:
            self._activities.extend(activities)
        for activity in activities:
            self._log.warning(
                "suspicious_activity_detected",
                activity_id=activity.activity_id,
                activity_type=activity.activity_type.value,
                user_id=activity.user_id,
                severity=activity.severity,
            )
