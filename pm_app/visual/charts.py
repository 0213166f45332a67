"""Chart builders (Altair) for the analytics page."""

from __future__ import annotations

from collections.abc import Mapping

import altair as alt
import pandas as pd

from pm_app.core.models import MetricsReport

CREATED_COLOR = "#1f77b4"
COMPLETED_COLOR = "#2ca02c"


def weekly_frame(report: MetricsReport) -> pd.DataFrame:
    """Long-form frame (week, week_start, series, count) for the weekly chart."""
    rows = []
    for bucket in report.weekly_data:
        for series, count in (("Created", bucket.created), ("Completed", bucket.completed)):
            rows.append({"week": bucket.week, "week_start": bucket.week_start, "series": series, "count": count})
    df = pd.DataFrame(rows, columns=["week", "week_start", "series", "count"])
    df["week_start"] = pd.to_datetime(df["week_start"])
    return df


def counts_frame(counts: Mapping[str, int], label: str) -> pd.DataFrame:
    """Two-column frame sorted by count (desc) then name, for bar charts."""
    df = pd.DataFrame(list(counts.items()), columns=[label, "count"])
    if df.empty:
        return df
    return df.sort_values(by=["count", label], ascending=[False, True], kind="stable").reset_index(drop=True)


def weekly_chart(report: MetricsReport):
    df = weekly_frame(report)
    if df.empty:
        return None
    order = [b.week for b in report.weekly_data]
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("week:N", sort=order, title="Week of"),
            xOffset="series:N",
            y=alt.Y("count:Q", title="Tickets"),
            color=alt.Color(
                "series:N",
                scale=alt.Scale(domain=["Created", "Completed"], range=[CREATED_COLOR, COMPLETED_COLOR]),
                legend=alt.Legend(title=None),
            ),
            tooltip=[
                alt.Tooltip("week:N", title="Week"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("count:Q", title="Count"),
            ],
        )
        .properties(height=300)
    )


def counts_bar_chart(counts: Mapping[str, int], label: str, *, color: str = "#4472C4", row_height: int = 22):
    df = counts_frame(counts, label)
    if df.empty:
        return None
    order_list = df[label].astype(str).tolist()
    return (
        alt.Chart(df)
        .mark_bar(color=color)
        .encode(
            y=alt.Y(f"{label}:N", sort=order_list, title=label),
            x=alt.X("count:Q", title="Tickets", axis=alt.Axis(format=",d")),
            tooltip=[
                alt.Tooltip(f"{label}:N", title=label),
                alt.Tooltip("count:Q", title="Tickets", format=",d"),
            ],
        )
        .properties(height=alt.Step(row_height))
    )
