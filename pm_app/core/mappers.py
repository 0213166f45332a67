"""Mapping raw Jira issue JSON into IssueModel / BoardTicket instances."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from .config import UNASSIGNED_LABEL
from .models import BoardTicket, IssueModel

ISSUE_FRAME_COLUMNS = (
    "key",
    "summary",
    "status",
    "assignee",
    "creator",
    "created",
    "updated",
    "resolution_date",
    "labels",
)


def parse_dt(val):
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _display_name(value: Any) -> str | None:
    if not isinstance(value, dict):
        return None
    name = value.get("displayName")
    if not isinstance(name, str) or not name.strip():
        return None
    return name


def _named(value: Any) -> str | None:
    if not isinstance(value, dict):
        return None
    name = value.get("name")
    return name if isinstance(name, str) and name else None


def map_issue(raw: dict[str, Any]) -> IssueModel:
    fields = raw.get("fields") or {}
    labels = fields.get("labels") or []
    return IssueModel(
        key=str(raw.get("key") or ""),
        summary=fields.get("summary"),
        status=_named(fields.get("status")),
        assignee=_display_name(fields.get("assignee")),
        creator=_display_name(fields.get("creator")),
        created=parse_dt(fields.get("created")),
        updated=parse_dt(fields.get("updated")),
        resolution_date=parse_dt(fields.get("resolutiondate")),
        labels=[str(label) for label in labels if isinstance(label, str)],
    )


def map_board_ticket(raw: dict[str, Any], server: str, tz=None) -> BoardTicket:
    """``updated`` is the calendar day of the last update in ``tz`` (UTC if unset)."""
    issue = map_issue(raw)
    updated = issue.updated.astimezone(tz) if issue.updated and tz else issue.updated
    return BoardTicket(
        key=issue.key,
        summary=issue.summary,
        status=issue.status,
        assignee=issue.assignee or UNASSIGNED_LABEL,
        updated=updated.date() if updated else None,
        url=f"{server.rstrip('/')}/browse/{issue.key}",
    )


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    """Frame with one row per issue; timestamps as tz-aware UTC columns.

    Sentinels are not applied here so aggregations can decide how to label
    absent people and statuses.
    """
    rows = [
        {
            "key": i.key,
            "summary": i.summary,
            "status": i.status,
            "assignee": i.assignee,
            "creator": i.creator,
            "created": i.created,
            "updated": i.updated,
            "resolution_date": i.resolution_date,
            "labels": list(i.labels),
        }
        for i in issues
    ]
    df = pd.DataFrame(rows, columns=list(ISSUE_FRAME_COLUMNS))
    for col in ("created", "updated", "resolution_date"):
        df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    return df


def tickets_to_dataframe(tickets: Iterable[BoardTicket]) -> pd.DataFrame:
    rows = [
        {
            "key": t.key,
            "summary": t.summary,
            "status": t.status,
            "assignee": t.assignee,
            "updated": t.updated,
            "days_stale": t.days_stale,
            "url": t.url,
        }
        for t in tickets
    ]
    return pd.DataFrame(rows)
