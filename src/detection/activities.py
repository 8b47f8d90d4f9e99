"""Suspicious activity records and their per-type context."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union
from uuid import uuid4

from src.utils.clock import format_timestamp, utc_now


class ActivityType(str, Enum):
    """Kinds of findings the detector can emit."""

    PRICE_MANIPULATION = "PriceManipulation"
    UNREALISTIC_QUANTITY = "UnrealisticQuantity"
    RAPID_TRANSACTIONS = "RapidTransactions"


@dataclass(frozen=True)
class PriceManipulationContext:
    item_id: str
    item_name: str
    previous_price: Decimal
    current_price: Decimal
    change_fraction: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "previous_price": str(self.previous_price),
            "current_price": str(self.current_price),
            "change_fraction": str(self.change_fraction),
        }


@dataclass(frozen=True)
class QuantityContext:
    item_id: str
    item_name: str
    quantity: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RapidTransactionContext:
    transaction_count: int
    window_seconds: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


ActivityContext = Union[PriceManipulationContext, QuantityContext, RapidTransactionContext]


@dataclass(frozen=True)
class SuspiciousActivity:
    """Immutable finding recorded when a detection rule fires."""

    user_id: str
    activity_type: ActivityType
    description: str
    severity: float
    context: ActivityContext
    detected_at: datetime = field(default_factory=utc_now)
    activity_id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def metadata(self) -> dict[str, Any]:
        return self.context.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Serialize activity to a JSON-compatible dict."""
        return {
            "activity_id": self.activity_id,
            "user_id": self.user_id,
            "activity_type": self.activity_type.value,
            "description": self.description,
            "severity": self.severity,
            "detected_at": format_timestamp(self.detected_at),
            "metadata": self.metadata,
        }
