"""Price observation records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.utils.clock import format_timestamp


@dataclass(frozen=True)
class PriceObservation:
    """One historical price sample, recorded on first sight or on price change."""

    item_id: str
    price: Decimal
    timestamp: datetime
    source: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize observation to a JSON-compatible dict."""
        return {
            "item_id": self.item_id,
            "price": str(self.price),
            "timestamp": format_timestamp(self.timestamp),
            "source": self.source,
        }
