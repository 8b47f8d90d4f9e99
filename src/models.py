"""Shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation

from src.utils.clock import ensure_utc, utc_now


@dataclass
class InventoryItem:
    """Current state of a tracked item. Full overwrite on every update."""

    id: str
    name: str
    current_price: Decimal
    quantity: int
    owner: str
    last_updated: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not isinstance(self.current_price, Decimal):
            try:
                self.current_price = Decimal(str(self.current_price))
            except InvalidOperation as exc:
                raise ValueError(f"invalid price for {self.id}: {self.current_price!r}") from exc
        if not self.current_price.is_finite() or self.current_price < 0:
            raise ValueError(f"price must be non-negative, got {self.current_price}")
        if self.quantity < 0:
            raise ValueError(f"quantity must be non-negative, got {self.quantity}")
        if not isinstance(self.last_updated, datetime):
            raise ValueError(f"last_updated must be a datetime, got {self.last_updated!r}")
        self.last_updated = ensure_utc(self.last_updated)

    def copy(self) -> "InventoryItem":
        return replace(self)
