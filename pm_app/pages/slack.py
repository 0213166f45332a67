"""Slack messenger page: search channels/users and post a message."""

from __future__ import annotations

import streamlit as st

from pm_app.app import register_page
from pm_app.core.errors import ErrorResponse
from pm_app.core.settings import Settings
from pm_app.features.notifications import find_recipients, send_message


@register_page("Slack Messenger")
def slack_page():
    st.title("Slack Messenger")
    settings: Settings | None = st.session_state.get("settings")
    if settings is None or not settings.slack.bot_token:
        st.warning("Configure SLACK_BOT_TOKEN in secrets or the environment first.")
        return

    query = st.text_input("Search channels or people", value="")
    recipients = find_recipients(settings, query)
    if isinstance(recipients, ErrorResponse):
        st.error(recipients.message)
        return
    if not recipients:
        st.info("No matching channels or users.")
        return

    choice = st.selectbox(
        "Send to",
        recipients,
        format_func=lambda r: f"{r.name} ({r.kind})",
    )
    message = st.text_area("Message", height=150)

    if st.button("Send", type="primary"):
        result = send_message(settings, choice.id, message)
        if isinstance(result, ErrorResponse):
            st.error(f"Failed to send: {result.message}")
        else:
            st.success(f"Message sent to {choice.name}.")
