"""Utility functions for the application."""

from __future__ import annotations

import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo


def get_timezone(name: Optional[str]) -> datetime.tzinfo:
    """Resolve an IANA timezone name, defaulting to UTC.

    Raises:
        zoneinfo.ZoneInfoNotFoundError: If ``name`` is not a known zone.
    """
    if not name or name.upper() == "UTC":
        return datetime.timezone.utc
    return ZoneInfo(name)


def to_date(value: Any, tz: Optional[datetime.tzinfo] = None) -> datetime.date | None:
    """Coerce a stored date value into a ``datetime.date``.

    Accepts dates, datetimes, Firestore timestamps and ISO-8601 strings.
    Timezone-aware values (Firestore timestamps are UTC) are converted to
    ``tz`` before the date is taken; naive values and strings are used as-is.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if value is None or value == "":
        return None
    if hasattr(value, "to_datetime"):
        value = value.to_datetime()
    if isinstance(value, datetime.datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        return datetime.date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def safe_to_date(value: Any, tz: Optional[datetime.tzinfo] = None) -> datetime.date | None:
    """Like ``to_date`` but returns None for values that are not dates."""
    try:
        return to_date(value, tz)
    except ValueError:
        return None


def today_in(tz: Optional[datetime.tzinfo] = None) -> datetime.date:
    """Return the current date in ``tz`` (UTC when not given)."""
    return datetime.datetime.now(tz or datetime.timezone.utc).date()
