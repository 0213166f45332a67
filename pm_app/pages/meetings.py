"""Meeting notes page: transcript action items and weekly business reviews."""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from pm_app.app import register_page
from pm_app.core.config import WBR_PROJECTS, WBR_TEXT_EXTENSIONS
from pm_app.core.errors import ErrorResponse
from pm_app.core.service import compute_metrics
from pm_app.core.settings import Settings
from pm_app.features.meetings import build_wbr, process_transcript, wbr_to_markdown


def _action_items_tab(settings: Settings) -> None:
    transcript = st.text_area("Paste a meeting transcript", height=250, key="transcript")
    if st.button("Extract Action Items", type="primary"):
        with st.spinner("Extracting action items"):
            result = process_transcript(settings, transcript)
        if isinstance(result, ErrorResponse):
            st.error(result.message)
            return
        st.session_state["action_items"] = result

    items = st.session_state.get("action_items")
    if not items:
        return
    df = pd.DataFrame([i.to_dict() for i in items])
    edited = st.data_editor(
        df,
        hide_index=True,
        disabled=["id"],
        column_config={
            "selected": st.column_config.CheckboxColumn("Keep"),
            "priority": st.column_config.SelectboxColumn("Priority", options=["high", "medium", "low"]),
        },
        key="action_items_editor",
    )
    kept = edited[edited["selected"]]
    lines = [f"- [{row.priority}] {row.task} ({row.assignee})" for row in kept.itertuples()]
    st.download_button(
        "Download selected items",
        data="\n".join(lines).encode("utf-8"),
        file_name="action_items.md",
        mime="text/markdown",
    )


def _project_metrics(settings: Settings) -> dict[str, dict]:
    metrics = {}
    for project in WBR_PROJECTS:
        result = compute_metrics(settings, project, "7d")
        if isinstance(result, ErrorResponse):
            st.warning(f"Metrics for {project} unavailable: {result.message}")
            continue
        metrics[project] = result.to_dict()
    return metrics


def _wbr_tab(settings: Settings) -> None:
    text = st.text_area("Notes, updates or transcripts", height=250, key="wbr_text")
    uploads = st.file_uploader(
        "Or upload text files",
        type=sorted(ext.lstrip(".") for ext in WBR_TEXT_EXTENSIONS),
        accept_multiple_files=True,
    )
    include_metrics = st.checkbox(
        f"Append last-7-day Jira metrics for {', '.join(WBR_PROJECTS)}",
        value=settings.jira.is_complete,
        disabled=not settings.jira.is_complete,
    )

    if st.button("Generate WBR", type="primary"):
        files = [(f.name, f.getvalue()) for f in uploads or []]
        with st.spinner("Generating weekly review"):
            result = build_wbr(settings, text=text, files=files)
        if isinstance(result, ErrorResponse):
            st.error(result.message)
            return
        metrics = _project_metrics(settings) if include_metrics else None
        st.session_state["wbr_markdown"] = wbr_to_markdown(result, metrics)

    markdown = st.session_state.get("wbr_markdown")
    if not markdown:
        return
    st.markdown(markdown)
    st.download_button(
        "Download WBR",
        data=markdown.encode("utf-8"),
        file_name=f"wbr_{date.today().isoformat()}.md",
        mime="text/markdown",
    )


@register_page("Meeting Notes")
def meetings_page():
    st.title("Meeting Notes")
    settings: Settings | None = st.session_state.get("settings")
    if settings is None or not settings.llm.api_key:
        st.warning("Configure ANTHROPIC_API_KEY in secrets or the environment first.")
        return
    items_tab, wbr_tab = st.tabs(["Action Items", "Weekly Business Review"])
    with items_tab:
        _action_items_tab(settings)
    with wbr_tab:
        _wbr_tab(settings)
