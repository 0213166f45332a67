"""Search Slack channels and people to pick a message recipient."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pm_app.core.config import SLACK_SEARCH_MAX_PER_KIND
from pm_app.core.errors import DashboardError
from pm_app.core.slack_client import SlackAPI

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Recipient:
    id: str
    name: str
    kind: str  # "channel" or "user"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "type": self.kind}


def _is_human(user: dict[str, Any]) -> bool:
    if user.get("deleted") or user.get("is_bot") or user.get("is_app_user"):
        return False
    return user.get("name") != "slackbot"


def _user_matches(user: dict[str, Any], needle: str) -> bool:
    if not needle:
        return True
    profile = user.get("profile") or {}
    candidates = (
        profile.get("display_name") or "",
        user.get("real_name") or profile.get("real_name") or "",
        user.get("name") or "",
    )
    return any(needle in str(c).lower() for c in candidates)


def _user_label(user: dict[str, Any]) -> str:
    profile = user.get("profile") or {}
    return "@" + str(profile.get("display_name") or user.get("real_name") or user.get("name") or "")


def _safe_listing(fetch, what: str) -> list[dict[str, Any]]:
    try:
        return fetch()
    except DashboardError as exc:
        logger.warning("Slack %s listing unavailable: %s", what, exc.message)
        return []


def search_recipients(
    api: SlackAPI,
    query: str = "",
    *,
    max_per_kind: int = SLACK_SEARCH_MAX_PER_KIND,
) -> list[Recipient]:
    """Channels first, then people; alphabetical within each group.

    A listing that fails contributes nothing rather than failing the search.
    """
    needle = (query or "").strip().lower()

    channels = [
        Recipient(id=str(ch.get("id")), name=f"#{ch.get('name')}", kind="channel")
        for ch in _safe_listing(api.list_channels, "channel")
        if not needle or needle in str(ch.get("name") or "").lower()
    ][:max_per_kind]

    users = [
        Recipient(id=str(u.get("id")), name=_user_label(u), kind="user")
        for u in _safe_listing(api.list_users, "user")
        if _is_human(u) and _user_matches(u, needle)
    ][:max_per_kind]

    channels.sort(key=lambda r: r.name.lower())
    users.sort(key=lambda r: r.name.lower())
    return channels + users
