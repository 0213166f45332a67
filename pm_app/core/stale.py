"""Stale ticket helper functions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from .config import DEFAULT_STALE_DAYS
from .models import BoardTicket


def compute_stale(
    tickets: Iterable[BoardTicket],
    days_threshold: int = DEFAULT_STALE_DAYS,
    today: date | None = None,
) -> list[BoardTicket]:
    """Board tickets idle for more than ``days_threshold`` whole days, most stale first."""
    today = today or date.today()
    out: list[BoardTicket] = []
    for ticket in tickets:
        if ticket.updated is None:
            continue
        days_stale = (today - ticket.updated).days
        if days_stale > days_threshold:
            out.append(replace(ticket, days_stale=days_stale))
    out.sort(key=lambda t: t.days_stale or 0, reverse=True)
    return out
