"""Conversions between stored calendar dates and API date-times.

Storage keeps year/month/day only. The API exchanges full date-times with
the time of day fixed at midnight. Both directions are total; ``None``
passes through unchanged so nullable columns stay null.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone


def to_datetime(value: date | None) -> datetime | None:
    """Expose a stored calendar date as a naive midnight date-time."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def to_date(value: datetime | date | None) -> date | None:
    """Reduce an API date-time to the calendar date that is stored.

    Aware values are read in UTC first so the stored day matches the
    instant the caller sent.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value
