"""Suspicious activity detection module."""

from src.detection.activities import (
    ActivityType,
    PriceManipulationContext,
    QuantityContext,
    RapidTransactionContext,
    SuspiciousActivity,
)
from src.detection.engine import CheaterDetector

__all__ = [
    "ActivityType",
    "CheaterDetector",
    "PriceManipulationContext",
    "QuantityContext",
    "RapidTransactionContext",
    "SuspiciousActivity",
]
