"""Slack notification feature: recipient search, direct messages, stale reminders."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pm_app.core.errors import DashboardError, ErrorResponse, ValidationError
from pm_app.core.models import BoardTicket
from pm_app.core.settings import Settings
from pm_app.core.slack_client import PostResult, SlackAPI
from pm_app.features.notifications.directory import Recipient, search_recipients
from pm_app.features.notifications.reminders import (
    ReminderResult,
    format_reminder,
    group_by_assignee,
    send_stale_reminders,
)

logger = logging.getLogger(__name__)


def find_recipients(
    settings: Settings,
    query: str = "",
    *,
    api: SlackAPI | None = None,
) -> list[Recipient] | ErrorResponse:
    try:
        return search_recipients(api or SlackAPI.from_settings(settings.slack), query)
    except DashboardError as exc:
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error fetching Slack channels/users")
        return ErrorResponse(500, "Failed to fetch channels/users")


def send_message(
    settings: Settings,
    channel_id: str,
    message: str,
    *,
    api: SlackAPI | None = None,
) -> PostResult | ErrorResponse:
    """Post one message; Slack-level refusals come back as 400s."""
    try:
        client = api or SlackAPI.from_settings(settings.slack)
        if not (channel_id or "").strip() or not (message or "").strip():
            raise ValidationError("Channel ID and message are required")
        result = client.post_message(channel_id, message)
    except DashboardError as exc:
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error sending Slack message")
        return ErrorResponse(500, "Failed to send message")
    if not result.ok:
        return ErrorResponse(400, result.error or "Failed to send message")
    return result


def send_reminders(
    settings: Settings,
    tickets: Iterable[BoardTicket],
    *,
    days_threshold: int | None = None,
    api: SlackAPI | None = None,
) -> list[ReminderResult] | ErrorResponse:
    if days_threshold is None:
        days_threshold = settings.analytics.stale_days
    try:
        client = api or SlackAPI.from_settings(settings.slack)
        return send_stale_reminders(
            client,
            tickets,
            settings.slack.user_ids,
            days_threshold=days_threshold,
        )
    except DashboardError as exc:
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error sending Slack reminders")
        return ErrorResponse(500, "Failed to send reminders")


__all__ = [
    "Recipient",
    "ReminderResult",
    "find_recipients",
    "format_reminder",
    "group_by_assignee",
    "search_recipients",
    "send_message",
    "send_reminders",
    "send_stale_reminders",
]
