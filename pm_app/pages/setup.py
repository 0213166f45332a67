"""Connection setup page: review credentials and check the Jira connection."""

from __future__ import annotations

import dataclasses

import streamlit as st

from pm_app.app import register_page
from pm_app.core.errors import DashboardError
from pm_app.core.jira_client import JiraAPI
from pm_app.core.service import IssueService
from pm_app.core.settings import JiraSettings, Settings


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Credentials come from Streamlit secrets or the environment; fields below override them.")

    settings: Settings = st.session_state.get("settings") or Settings()
    jira = settings.jira

    server = st.text_input("Jira Server URL", value=jira.server)
    email = st.text_input("Email / Username", value=jira.email)
    token = st.text_input("API Token", type="password", value=jira.token)
    project = st.text_input("Default project key", value=settings.default_project)

    col_save, col_check = st.columns(2)
    save_btn = col_save.button("Save Settings", type="primary")
    check_btn = col_check.button("Test Connection")

    if save_btn:
        if not (server and email and token):
            st.error("All Jira fields are required.")
            return
        settings = dataclasses.replace(
            settings,
            jira=JiraSettings(server=server.rstrip("/"), email=email, token=token),
            default_project=(project or settings.default_project).strip().upper(),
        )
        st.session_state["settings"] = settings
        st.success("Settings saved for this session.")

    if check_btn:
        if not settings.jira.is_complete:
            st.error("Jira credentials not configured.")
            return
        try:
            result = IssueService(JiraAPI.from_settings(settings.jira), settings).check_connection()
        except DashboardError as exc:
            st.error(f"Failed to initialize Jira client: {exc.message}")
            return
        if result["ok"]:
            user = result["user"] or {}
            st.success(f"Connected as {user.get('displayName') or 'unknown user'}.")
        else:
            st.error(f"Jira rejected the credentials (status {result['status']}).")
        st.json(result["envCheck"])

    services = {
        "Jira": settings.jira.is_complete,
        "Slack": bool(settings.slack.bot_token),
        "Anthropic": bool(settings.llm.api_key),
    }
    st.markdown("---")
    for name, ready in services.items():
        st.write(f"{'✅' if ready else '⚠️'} {name} {'configured' if ready else 'not configured'}")
