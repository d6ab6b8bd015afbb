"""
Time parsing and timezone normalization.

TrailQuest treats all timestamps as timezone-aware datetimes so that discovery
histories coming from different clients can be sorted and subtracted safely.
"""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def parse_datetime(value: str, timezone: str) -> datetime:
    """Parse ISO-8601 datetime string and ensure tzinfo is present.

    Notes:
    - Accepts a trailing `Z` (UTC) and converts it to `+00:00` for `fromisoformat`.
    - If the parsed value is naive, the provided `timezone` is attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    return ensure_tz(dt, timezone)


def seconds_between(earlier: datetime, later: datetime) -> float:
    """Seconds from `earlier` to `later` (negative if out of order)."""
    return (later - earlier).total_seconds()


def assume_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values pass through unchanged."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt
