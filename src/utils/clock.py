"""UTC timestamp helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """Format timestamp as ISO-8601 with Z suffix."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ensure_utc(ts: datetime) -> datetime:
    """Return ``ts`` as an aware UTC timestamp. Naive values are taken to be UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def resolve_now(now: datetime | None) -> datetime:
    """Return ``now`` normalised to UTC, or the current UTC time when omitted."""
    return ensure_utc(now) if now is not None else utc_now()
