"""Slack Web API wrapper (conversations, users, chat.postMessage)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from .config import SLACK_API_BASE, SLACK_LIST_LIMIT, SLACK_REQUEST_TIMEOUT
from .errors import ResponseFormatError, UpstreamError
from .settings import SlackSettings

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PostResult:
    ok: bool
    channel: str | None = None
    ts: str | None = None
    error: str | None = None


class SlackAPI:
    def __init__(
        self,
        token: str,
        *,
        base_url: str = SLACK_API_BASE,
        timeout: float = SLACK_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    @classmethod
    def from_settings(cls, settings: SlackSettings) -> SlackAPI:
        settings.require()
        return cls(settings.bot_token, base_url=settings.api_base)

    def _call(self, http_method: str, method: str, **kwargs) -> dict[str, Any]:
        url = f"{self.base_url}/{method}"
        try:
            resp = self.session.request(http_method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("Slack %s request failed: %s", method, exc)
            raise UpstreamError(502, f"Slack API error: {method}") from exc
        if resp.status_code >= 400:
            logger.error("Slack %s failed %s: %s", method, resp.status_code, resp.text[:200])
            raise UpstreamError(resp.status_code, f"Slack API error: {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise ResponseFormatError(f"Unexpected Slack response for {method}") from exc
        if not isinstance(data, dict):
            raise ResponseFormatError(f"Unexpected Slack response for {method}")
        return data

    def list_channels(self, limit: int = SLACK_LIST_LIMIT) -> list[dict[str, Any]]:
        """Public, non-archived channels; an unsuccessful call yields an empty list."""
        data = self._call(
            "GET",
            "conversations.list",
            params={"types": "public_channel", "exclude_archived": "true", "limit": limit},
        )
        if not data.get("ok"):
            logger.warning("Slack conversations.list not ok: %s", data.get("error"))
            return []
        return [c for c in data.get("channels") or [] if isinstance(c, dict)]

    def list_users(self, limit: int = SLACK_LIST_LIMIT) -> list[dict[str, Any]]:
        data = self._call("GET", "users.list", params={"limit": limit})
        if not data.get("ok"):
            logger.warning("Slack users.list not ok: %s", data.get("error"))
            return []
        return [m for m in data.get("members") or [] if isinstance(m, dict)]

    def post_message(self, channel: str, text: str) -> PostResult:
        data = self._call("POST", "chat.postMessage", json={"channel": channel, "text": text})
        if not data.get("ok"):
            logger.error("Slack chat.postMessage to %s failed: %s", channel, data.get("error"))
            return PostResult(ok=False, error=data.get("error") or "Failed to send message")
        return PostResult(ok=True, channel=data.get("channel"), ts=data.get("ts"))
