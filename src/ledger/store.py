"""Thread-safe store of current item state and append-only price history."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from decimal import Decimal

import numpy as np
import structlog

from src.ledger.observations import PriceObservation
from src.models import InventoryItem
from src.utils.clock import ensure_utc, resolve_now


class PriceLedger:
    """Authoritative item store with price observation history.

    Callers only ever see copies of stored items, so mutating a returned or
    submitted item never changes ledger state. A single lock guards both the
    item map and the history list.
    """

    def __init__(self) -> None:
        self._items: dict[str, InventoryItem] = {}
        self._history: list[PriceObservation] = []
        self._lock = threading.Lock()
        self._log = structlog.get_logger(__name__)

    @property
    def item_count(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def history_size(self) -> int:
        with self._lock:
            return len(self._history)

    def upsert_item(self, item: InventoryItem, now: datetime | None = None) -> None:
        """Insert or overwrite the record for ``item.id``.

        A price observation is appended when the id is new or its price
        differs from the stored one.
        """
        now = resolve_now(now)
        with self._lock:
            existing = self._items.get(item.id)
            if existing is None or existing.current_price != item.current_price:
                self._history.append(
                    PriceObservation(
                        item_id=item.id,
                        price=item.current_price,
                        timestamp=now,
                        source=item.owner,
                    )
                )
                self._log.debug(
                    "price_observed",
                    item_id=item.id,
                    price=str(item.current_price),
                    previous_price=str(existing.current_price) if existing else None,
                    source=item.owner,
                )
            stored = item.copy()
            stored.last_updated = now
            self._items[item.id] = stored

    def get_item(self, item_id: str) -> InventoryItem | None:
        with self._lock:
            item = self._items.get(item_id)
            return item.copy() if item else None

    def list_items(self) -> list[InventoryItem]:
        with self._lock:
            return [item.copy() for item in self._items.values()]

    def items_for_owner(self, owner: str, since: datetime | None = None) -> list[InventoryItem]:
        """Return copies of items held by ``owner``, optionally updated at or after ``since``."""
        if since is not None:
            since = ensure_utc(since)
        with self._lock:
            return [
                item.copy()
                for item in self._items.values()
                if item.owner == owner and (since is None or item.last_updated >= since)
            ]

    def get_price_history(self, item_id: str) -> list[PriceObservation]:
        with self._lock:
            return sorted(
                (obs for obs in self._history if obs.item_id == item_id),
                key=lambda obs: obs.timestamp,
            )

    def get_all_price_history(self) -> list[PriceObservation]:
        with self._lock:
            return sorted(self._history, key=lambda obs: obs.timestamp)

    def get_average_price(
        self,
        item_id: str,
        window: timedelta,
        now: datetime | None = None,
    ) -> Decimal:
        """Mean observed price within ``[now - window, now]``; 0 when nothing matches."""
        prices = self._window_prices(item_id, window, now)
        if not prices:
            return Decimal(0)
        return sum(prices, Decimal(0)) / len(prices)

    def get_price_volatility(
        self,
        item_id: str,
        window: timedelta,
        now: datetime | None = None,
    ) -> float:
        """Population standard deviation of observed prices within the window."""
        prices = self._window_prices(item_id, window, now)
        if len(prices) < 2:
            return 0.0
        return float(np.std(np.array([float(p) for p in prices]), ddof=0))

    def remove_item(self, item_id: str) -> bool:
        """Drop the current record. Price history for the id is kept."""
        with self._lock:
            removed = self._items.pop(item_id, None) is not None
        if removed:
            self._log.info("item_removed", item_id=item_id)
        return removed

    def _window_prices(
        self,
        item_id: str,
        window: timedelta,
        now: datetime | None,
    ) -> list[Decimal]:
        now = resolve_now(now)
        cutoff = now - window
        with self._lock:
            return [
                obs.price
                for obs in self._history
                if obs.item_id == item_id and cutoff <= obs.timestamp <= now
            ]
