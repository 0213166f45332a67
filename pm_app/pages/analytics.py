"""Analytics page: created vs completed, velocity, assignee/label breakdowns, WIP."""

from __future__ import annotations

import json

import pandas as pd
import streamlit as st

from pm_app.app import register_page
from pm_app.core.config import DEFAULT_RANGE_KEYWORD, RANGE_KEYWORDS
from pm_app.core.errors import ErrorResponse
from pm_app.core.service import compute_metrics
from pm_app.core.settings import Settings
from pm_app.visual.charts import counts_bar_chart, weekly_chart
from pm_app.visual.column_metadata import apply_column_metadata
from pm_app.visual.progress import ProgressReporter


def _render_counts(title: str, counts: dict[str, int], label: str, color: str) -> None:
    st.subheader(title)
    chart = counts_bar_chart(counts, label, color=color)
    if chart is None:
        st.info("No tickets in this range.")
        return
    st.altair_chart(chart, use_container_width=True)


@register_page("Analytics")
def analytics_page():
    st.title("Project Analytics")
    settings: Settings | None = st.session_state.get("settings")
    if settings is None or not settings.jira.is_complete:
        st.warning("Configure Jira credentials on the Setup page first.")
        return

    col_project, col_range = st.columns(2)
    project = col_project.text_input("Project key", value=st.session_state.get("project_key", settings.default_project))
    keywords = list(RANGE_KEYWORDS)
    range_keyword = col_range.selectbox(
        "Date range",
        keywords,
        index=keywords.index(DEFAULT_RANGE_KEYWORD),
        format_func=RANGE_KEYWORDS.get,
    )

    if st.button("Compute Metrics", type="primary"):
        st.session_state["project_key"] = project
        reporter = ProgressReporter(f"Loading analytics for {project}")
        result = compute_metrics(settings, project, range_keyword, progress=reporter.callback)
        if isinstance(result, ErrorResponse):
            reporter.error(f"{result.message} (HTTP {result.http_status})")
            st.session_state.pop("metrics_report", None)
        else:
            reporter.complete(f"Metrics ready for {result.date_range.start} to {result.date_range.end}.")
            st.session_state["metrics_report"] = result

    report = st.session_state.get("metrics_report")
    if report is None:
        st.info("Pick a project and range, then compute metrics.")
        return

    st.caption(f"{report.date_range.start} to {report.date_range.end}")
    m1, m2, m3, m4, m5 = st.columns(5)
    m1.metric("Created", report.tickets_created)
    m2.metric("Completed", report.tickets_completed)
    m3.metric("Completion Rate", f"{report.completion_rate}%")
    m4.metric("Avg Time Open", f"{report.avg_time_open} d")
    m5.metric("Velocity", f"{report.avg_velocity} / wk")

    st.subheader("Weekly created vs completed")
    chart = weekly_chart(report)
    if chart is None:
        st.info("No weekly data.")
    else:
        st.altair_chart(chart, use_container_width=True)

    left, right = st.columns(2)
    with left:
        _render_counts("Created by assignee", report.created_by_assignee, "assignee", "#1f77b4")
    with right:
        _render_counts("Completed by assignee", report.completed_by_assignee, "assignee", "#2ca02c")

    _render_counts("Tickets by label", report.tickets_by_label, "label", "#ff7f0e")
    merged = {k: v for k, v in report.label_variants.items() if len(v) > 1}
    if merged:
        with st.expander("Merged label spellings"):
            for label, variants in merged.items():
                st.write(f"**{label}**: {', '.join(variants)}")

    st.subheader("Work in progress by status")
    wip = pd.DataFrame(
        [{"status": s.status, "count": s.count} for s in report.wip_by_status],
        columns=["status", "count"],
    )
    if wip.empty:
        st.info("No work in progress.")
    else:
        st.dataframe(wip, hide_index=True, column_config=apply_column_metadata(wip.columns))

    st.download_button(
        "Download metrics JSON",
        data=json.dumps(report.to_dict(), indent=2).encode("utf-8"),
        file_name=f"metrics_{project}_{range_keyword}.json",
        mime="application/json",
    )
    weekly = pd.DataFrame([b.to_dict() for b in report.weekly_data])
    if not weekly.empty:
        st.dataframe(weekly, hide_index=True, column_config=apply_column_metadata(weekly.columns))
