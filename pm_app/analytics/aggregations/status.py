"""Work-in-progress breakdown by workflow status."""

from __future__ import annotations

import pandas as pd

from pm_app.core.models import StatusCount
from pm_app.core.status import clean_status_name


def wip_by_status(df: pd.DataFrame) -> list[StatusCount]:
    """Counts per status, largest first; ties keep first-seen order."""
    if df.empty:
        return []
    statuses = df.get("status", pd.Series([None] * len(df), index=df.index))
    frame = statuses.map(clean_status_name).to_frame("status")
    counts = frame.groupby("status", sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")
    return [StatusCount(status=str(name), count=int(n)) for name, n in counts.items()]
