"""Resolve a range keyword (``7d``, ``month``...) into a calendar DateRange."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytz

from .config import DEFAULT_RANGE_KEYWORD, TIMEZONE
from .models import DateRange

_DAY_RANGES: dict[str, int] = {"7d": 7, "14d": 14, "30d": 30, "90d": 90}


def _local_now(now: datetime | None, tz) -> datetime:
    if now is None:
        return datetime.now(tz=tz)
    if now.tzinfo is None:
        return tz.localize(now) if hasattr(tz, "localize") else now.replace(tzinfo=tz)
    return now.astimezone(tz)


def quarter_start(day: date) -> date:
    return date(day.year, ((day.month - 1) // 3) * 3 + 1, 1)


def resolve_date_range(keyword: str | None, now: datetime | None = None, tz=None) -> DateRange:
    """Map a range keyword onto ``[start, end]`` relative to ``now``.

    Keywords match exactly; unknown or missing ones fall back to the 30 day
    window. ``end`` is today's date in ``tz`` (the dashboard timezone by default).
    """
    tz = tz or pytz.timezone(TIMEZONE)
    local_now = _local_now(now, tz)
    end = local_now.date()

    key = keyword or ""
    if key == "month":
        start = end.replace(day=1)
    elif key == "quarter":
        start = quarter_start(end)
    else:
        days = _DAY_RANGES.get(key, _DAY_RANGES[DEFAULT_RANGE_KEYWORD])
        start = (local_now - timedelta(days=days)).date()
    return DateRange(start=start, end=end)
