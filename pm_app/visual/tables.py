"""Ticket tables: Jira links and the column set shown for each view."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from pm_app.core.column_config import get_columns

LINK_LABEL = "Ticket"


def with_ticket_links(df: pd.DataFrame, server: str, label: str = LINK_LABEL):
    """Copy of ``df`` with a link column, plus the matching column_config entry.

    Board tickets already carry their ``url``; other frames get one built
    from ``key``.
    """
    if df.empty or "key" not in df.columns:
        return df, {}
    out = df.copy()
    if "url" in out.columns:
        out[label] = out["url"].fillna("").astype(str)
    else:
        base = server.rstrip("/")
        out[label] = [f"{base}/browse/{k}" if isinstance(k, str) and k else "" for k in out["key"]]
    link = st.column_config.LinkColumn(label, display_text=r"browse/(.*)$", help="Open in Jira")
    return out, {label: link}


def prepare_ticket_table(
    df: pd.DataFrame,
    server: str,
    *,
    column_set: str = "board",
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}
    table, cfg = with_ticket_links(df, server)
    columns = [c for c in get_columns(column_set) if c in table.columns]
    return table, columns or [c for c in table.columns if c not in ("key", "url")], cfg
