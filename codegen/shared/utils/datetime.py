"""Datetime helpers for rendering codes in a configured timezone."""

from datetime import datetime, tzinfo


def now_in(zone: tzinfo) -> datetime:
    """Return the current time as an aware datetime in zone (for rendering codes)."""
    return datetime.now(zone)
