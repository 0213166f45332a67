"""Bulk Slack reminders for stale board tickets, one DM per assignee."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from pm_app.core.config import DEFAULT_STALE_DAYS
from pm_app.core.errors import DashboardError
from pm_app.core.models import BoardTicket
from pm_app.core.slack_client import SlackAPI

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "Slack user not found"


@dataclass(slots=True, frozen=True)
class ReminderResult:
    assignee: str
    success: bool
    error: str | None = None
    ticket_count: int = 0

    def to_dict(self) -> dict[str, object]:
        return {"assignee": self.assignee, "success": self.success, "error": self.error}


def group_by_assignee(tickets: Iterable[BoardTicket]) -> dict[str, list[BoardTicket]]:
    grouped: dict[str, list[BoardTicket]] = {}
    for ticket in tickets:
        grouped.setdefault(ticket.assignee, []).append(ticket)
    return grouped


def format_reminder(tickets: list[BoardTicket], days_threshold: int = DEFAULT_STALE_DAYS) -> str:
    count = len(tickets)
    plural = "s" if count > 1 else ""
    lines = "\n".join(
        f"• *{t.key}* - {t.summary or ''} ({t.days_stale if t.days_stale is not None else '?'} days) → {t.url}"
        for t in tickets
    )
    return (
        "Hey! 👋\n\n"
        f"You have *{count} ticket{plural}* on the board with no updates for more than "
        f"{days_threshold} days:\n\n"
        f"{lines}\n\n"
        "Need a hand? 🙌"
    )


def send_stale_reminders(
    api: SlackAPI,
    tickets: Iterable[BoardTicket],
    user_ids: Mapping[str, str],
    *,
    days_threshold: int = DEFAULT_STALE_DAYS,
) -> list[ReminderResult]:
    """DM each assignee their stale tickets; one result per assignee."""
    results: list[ReminderResult] = []
    for assignee, assigned in group_by_assignee(tickets).items():
        slack_id = user_ids.get(assignee)
        if not slack_id:
            results.append(ReminderResult(assignee, False, USER_NOT_FOUND, len(assigned)))
            continue
        try:
            posted = api.post_message(slack_id, format_reminder(assigned, days_threshold))
        except DashboardError as exc:
            logger.warning("Reminder to %s failed: %s", assignee, exc.message)
            results.append(ReminderResult(assignee, False, exc.message, len(assigned)))
            continue
        results.append(ReminderResult(assignee, posted.ok, posted.error, len(assigned)))
    sent = sum(1 for r in results if r.success)
    logger.info("Stale reminders sent: %d/%d assignees", sent, len(results))
    return results
