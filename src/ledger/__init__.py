"""Item state and price history ledger."""

from src.ledger.observations import PriceObservation
from src.ledger.store import PriceLedger

__all__ = ["PriceLedger", "PriceObservation"]
