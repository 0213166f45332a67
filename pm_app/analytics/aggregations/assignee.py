"""Assignee-based aggregations."""

from __future__ import annotations

import pandas as pd

from pm_app.core.config import UNASSIGNED_LABEL


def assignee_labels(df: pd.DataFrame, placeholder: str = UNASSIGNED_LABEL) -> pd.Series:
    if "assignee" not in df.columns:
        return pd.Series([placeholder] * len(df), index=df.index, dtype="object")
    return df["assignee"].map(lambda v: v if isinstance(v, str) and v.strip() else placeholder)


def count_by_assignee(df: pd.DataFrame, placeholder: str = UNASSIGNED_LABEL) -> dict[str, int]:
    """Tickets per assignee display name; absent assignees use the placeholder."""
    if df.empty:
        return {}
    labels = assignee_labels(df, placeholder).to_frame("assignee")
    counts = labels.groupby("assignee", sort=False).size()
    return {str(name): int(n) for name, n in counts.items()}
