"""Board & stale tickets page.

Lists in-flight tickets for a project, flags the ones idle past the stale
threshold, and can DM each assignee a reminder over Slack.
"""

from __future__ import annotations

import streamlit as st

from pm_app.app import register_page
from pm_app.core.errors import ErrorResponse
from pm_app.core.mappers import tickets_to_dataframe
from pm_app.core.service import board_tickets, stale_tickets
from pm_app.core.settings import Settings
from pm_app.features.notifications import send_reminders
from pm_app.visual.column_metadata import apply_column_metadata
from pm_app.visual.tables import prepare_ticket_table


def _render_tickets(tickets, server: str, column_set: str, file_name: str) -> None:
    df = tickets_to_dataframe(tickets)
    prepared, display_cols, cfg = prepare_ticket_table(df, server, column_set=column_set)
    if not display_cols:
        st.info("No tickets.")
        return
    st.dataframe(prepared[display_cols], hide_index=True, column_config=apply_column_metadata(display_cols, cfg))
    csv = prepared[display_cols].to_csv(index=False).encode("utf-8")
    st.download_button("Download CSV", data=csv, file_name=file_name, mime="text/csv", key=f"dl_{column_set}")


@register_page("Board & Stale Tickets")
def board_page():
    st.title("Board & Stale Tickets")
    settings: Settings | None = st.session_state.get("settings")
    if settings is None or not settings.jira.is_complete:
        st.warning("Configure Jira credentials on the Setup page first.")
        return

    project = st.text_input("Project key", value=st.session_state.get("project_key", settings.default_project))
    stale_days = st.number_input(
        "Mark stale if no update in more than N days",
        min_value=0,
        value=settings.analytics.stale_days,
        step=1,
    )

    if st.button("Fetch Tickets", type="primary"):
        st.session_state["project_key"] = project
        with st.spinner(f"Fetching board for {project}"):
            board = board_tickets(settings, project)
            stale = stale_tickets(settings, project, days_threshold=int(stale_days))
        for result in (board, stale):
            if isinstance(result, ErrorResponse):
                st.error(f"{result.message} (HTTP {result.http_status})")
                return
        st.session_state["board_tickets"] = board
        st.session_state["stale_tickets"] = stale

    board = st.session_state.get("board_tickets")
    stale = st.session_state.get("stale_tickets")
    if board is None:
        st.info("No tickets fetched yet.")
        return

    server = settings.jira.server
    st.subheader(f"Active board ({len(board)})")
    _render_tickets(board, server, "board", f"board_{project}.csv")

    st.markdown("---")
    st.subheader(f"Stale tickets ({len(stale)})")
    st.caption(f"In-flight tickets not updated for more than {int(stale_days)} day(s).")
    if not stale:
        st.success("Nothing stale.")
        return
    _render_tickets(stale, server, "stale", f"stale_{project}.csv")

    if not settings.slack.bot_token:
        st.info("Configure a Slack bot token to send reminders.")
        return
    if st.button("Send Slack reminders"):
        results = send_reminders(settings, stale, days_threshold=int(stale_days))
        if isinstance(results, ErrorResponse):
            st.error(results.message)
            return
        for r in results:
            if r.success:
                st.write(f"✅ {r.assignee}: {r.ticket_count} ticket(s)")
            else:
                st.write(f"❌ {r.assignee}: {r.error}")
