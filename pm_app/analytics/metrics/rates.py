"""Rate and duration metrics (pure functions)."""

from __future__ import annotations

import math

import pandas as pd

from pm_app.core.models import DateRange

SECONDS_PER_DAY = 86400.0


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with .5 going up, the way dashboards usually display figures.

    Python's ``round`` uses banker's rounding, which turns 2.5 into 2.
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def completion_rate(created: int, completed: int) -> int:
    """Percent of created tickets completed; 0 when nothing was created.

    Completed tickets may have been created before the range, so the value
    can exceed 100.
    """
    if created <= 0:
        return 0
    return int(round_half_up(completed * 100.0 / created))


def resolution_durations(df: pd.DataFrame) -> pd.Series:
    """Days from creation to resolution for rows with both timestamps.

    Rows missing either timestamp, or with a negative duration, are dropped.
    """
    if df.empty or "created" not in df.columns or "resolution_date" not in df.columns:
        return pd.Series(dtype="float64")
    created = pd.to_datetime(df["created"], utc=True, errors="coerce")
    resolved = pd.to_datetime(df["resolution_date"], utc=True, errors="coerce")
    durations = (resolved - created).dt.total_seconds() / SECONDS_PER_DAY
    durations = durations.dropna()
    return durations[durations >= 0]


def average_time_open(completed: pd.DataFrame, *, dated_only: bool = False) -> int:
    """Average whole days a completed ticket stayed open.

    By default the sum of known durations is divided by every completed
    ticket; ``dated_only`` divides by the tickets that have a duration.
    """
    durations = resolution_durations(completed)
    denominator = len(durations) if dated_only else len(completed)
    if denominator <= 0:
        return 0
    return int(round_half_up(float(durations.sum()) / denominator))


def average_velocity(completed: int, date_range: DateRange) -> float:
    """Completed tickets per week over the range, one decimal."""
    weeks = max(1.0, date_range.days / 7.0)
    return round_half_up(completed / weeks, 1)
