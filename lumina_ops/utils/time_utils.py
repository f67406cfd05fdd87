"""
Time helpers - all stored timestamps are timezone-aware.
"""
from datetime import date, datetime, time, timezone

import pytz


def utc_now() -> datetime:
    """Current time in UTC (aware)"""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime, tz=None) -> datetime:
    """Attach ``tz`` (default UTC) to a naive datetime, leave aware ones as-is"""
    if value.tzinfo is not None:
        return value
    tz = tz or pytz.UTC
    return tz.localize(value) if hasattr(tz, "localize") else value.replace(tzinfo=tz)


def local_deadline(day: date, at: time, tz_name: str) -> datetime:
    """
    Build an aware deadline for ``day`` at local time ``at`` in ``tz_name``.

    pytz zones must be attached with localize() so DST is resolved
    for the given date.
    """
    tz = pytz.timezone(tz_name)
    return tz.localize(datetime.combine(day, at))
