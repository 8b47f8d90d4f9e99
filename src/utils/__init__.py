"""Utility helpers."""

from src.utils.clock import ensure_utc, format_timestamp, resolve_now, utc_now

__all__ = ["ensure_utc", "format_timestamp", "resolve_now", "utc_now"]
