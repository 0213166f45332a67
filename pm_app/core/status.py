"""Status name cleanup and JQL rendering of status sets.

Workflow states are an open set defined by the tracker configuration, so
names are passed through as-is apart from null-like values.
"""

from __future__ import annotations

from .config import UNKNOWN_STATUS


def clean_status_name(value: str | None) -> str:
    """Sanitize status string, converting null-like values to "Unknown".

    Parameters
    ----------
    value : str | None
        Raw status string.

    Returns
    -------
    str
        Cleaned status string or "Unknown" for empty/null values.
    """
    if not value:
        return UNKNOWN_STATUS
    text = str(value).strip()
    if not text:
        return UNKNOWN_STATUS
    if text.lower() in {"nan", "none", "null"}:
        return UNKNOWN_STATUS
    return text


def jql_value_list(values) -> str:
    """Render status names for a JQL ``IN (...)`` clause, quoting multi-word names."""
    rendered = []
    for v in values:
        rendered.append(f'"{v}"' if " " in v else v)
    return ", ".join(rendered)
