"""
Time helpers.

Scheduling and analytics take "now" as an explicit argument; ``utc_now`` is
only the default clock handed to stateful objects at construction.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(timestamp: datetime) -> datetime:
    """Interpret naive datetimes as UTC and normalise aware ones to UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def utc_day(timestamp: datetime) -> date:
    """Calendar day (UTC) a timestamp falls on."""
    return ensure_utc(timestamp).date()


def end_of_utc_day(timestamp: datetime) -> datetime:
    """Last representable instant of the timestamp's UTC calendar day."""
    return datetime.combine(utc_day(timestamp), time.max, tzinfo=timezone.utc)


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Read an ISO-8601 string (or a datetime) back as an aware UTC datetime.

    Empty values return None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value))
