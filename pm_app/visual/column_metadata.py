"""Human labels and hover help for the dashboard's table columns."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import streamlit as st


def _text(label: str, help_text: str) -> Callable[[], Any]:
    return lambda: st.column_config.TextColumn(label, help=help_text)


def _count(label: str, help_text: str) -> Callable[[], Any]:
    return lambda: st.column_config.NumberColumn(label, help=help_text, format="%d")


COLUMN_FACTORIES: dict[str, Callable[[], Any]] = {
    "summary": _text("Summary", "Issue summary from Jira."),
    "status": _text("Status", "Current Jira workflow status."),
    "assignee": _text("Assignee", "Current owner of the ticket."),
    "week": _text("Week of", "Monday that starts the week."),
    "updated": lambda: st.column_config.DateColumn(
        "Updated", help="Date of the most recent update in Jira.", format="YYYY-MM-DD"
    ),
    "days_stale": _count("Days Stale", "Whole days since the ticket was last updated."),
    "created": _count("Created", "Tickets created."),
    "completed": _count("Completed", "Tickets completed."),
    "count": _count("Tickets", "Number of tickets."),
}


def apply_column_metadata(columns: Iterable[str], existing: dict[str, Any] | None = None) -> dict[str, Any]:
    """column_config for ``columns``; entries already in ``existing`` win."""
    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col not in config and col in COLUMN_FACTORIES:
            config[col] = COLUMN_FACTORIES[col]()
    return config
