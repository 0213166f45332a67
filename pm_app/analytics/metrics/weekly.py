"""Monday-start weekly bucketing of created / completed tickets.

Windows cover whole calendar days in the dashboard timezone:
``[week_start 00:00, week_start + 7d 00:00)``, so a ticket resolved late on
the window's last day still lands in that window.
"""

from __future__ import annotations

from datetime import date, timedelta

import pandas as pd
import pytz

from pm_app.core.config import TIMEZONE
from pm_app.core.models import DateRange, WeeklyBucket


def monday_on_or_before(day: date) -> date:
    """Sunday steps back six days; other weekdays step back to Monday."""
    return day - timedelta(days=day.weekday())


def week_label(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def iter_week_starts(date_range: DateRange):
    current = monday_on_or_before(date_range.start)
    while current <= date_range.end:
        yield current
        current += timedelta(days=7)


def _local_series(df: pd.DataFrame, column: str, tz) -> pd.Series:
    if df.empty or column not in df.columns:
        return pd.Series(dtype="datetime64[ns, UTC]")
    series = pd.to_datetime(df[column], utc=True, errors="coerce").dropna()
    return series.dt.tz_convert(tz)


def _count_within(series: pd.Series, start: pd.Timestamp, end: pd.Timestamp) -> int:
    if series.empty:
        return 0
    return int(((series >= start) & (series < end)).sum())


def weekly_series(
    created: pd.DataFrame,
    completed: pd.DataFrame,
    date_range: DateRange,
    *,
    tz=None,
) -> list[WeeklyBucket]:
    tz = tz or pytz.timezone(TIMEZONE)
    created_ts = _local_series(created, "created", tz)
    resolved_ts = _local_series(completed, "resolution_date", tz)

    buckets: list[WeeklyBucket] = []
    for week_start in iter_week_starts(date_range):
        lower = pd.Timestamp(week_start).tz_localize(tz)
        upper = pd.Timestamp(week_start + timedelta(days=7)).tz_localize(tz)
        buckets.append(
            WeeklyBucket(
                week_start=week_start,
                week=week_label(week_start),
                created=_count_within(created_ts, lower, upper),
                completed=_count_within(resolved_ts, lower, upper),
            )
        )
    return buckets
