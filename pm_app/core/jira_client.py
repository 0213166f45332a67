"""Jira API client wrapper (REST v3 JQL search, single bounded page)."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests
from jira import JIRA, JIRAError

from .config import JIRA_REQUEST_TIMEOUT, SEARCH_RESULT_CAP
from .errors import ResponseFormatError, UpstreamError
from .settings import JiraSettings

logger = logging.getLogger(__name__)


class JiraAPI:
    def __init__(self, server: str, email: str, token: str, *, timeout: float = JIRA_REQUEST_TIMEOUT):
        self.server = server.rstrip("/")
        self.email = email
        # max_retries=0: a failed call surfaces immediately, nothing is retried
        self.client = JIRA(
            basic_auth=(email, token),
            options={"server": self.server, "rest_api_version": "3"},
            get_server_info=False,
            max_retries=0,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: JiraSettings) -> JiraAPI:
        settings.require()
        return cls(settings.server, settings.email, settings.token)

    def _session(self):
        session = getattr(self.client, "_session", None)
        if session is None:
            raise RuntimeError("JIRA session unavailable")
        return session

    def search(
        self,
        jql: str,
        fields: list[str] | None = None,
        max_results: int = SEARCH_RESULT_CAP,
    ) -> list[dict[str, Any]]:
        """Run one JQL search and return the raw ``issues`` list (one page only)."""
        url = f"{self.server}/rest/api/3/search/jql"
        body: dict[str, Any] = {"jql": jql, "maxResults": max_results}
        if fields:
            body["fields"] = list(fields)
        try:
            resp = self._session().post(
                url,
                data=json.dumps(body),
                headers={"Accept": "application/json", "Content-Type": "application/json"},
            )
        except (requests.RequestException, JIRAError) as exc:
            logger.error("Jira search request failed for %r: %s", jql, exc)
            status = getattr(exc, "status_code", None) or 502
            raise UpstreamError(status, f"Jira API error: {status}") from exc

        if resp.status_code >= 400:
            logger.error("Jira search failed %s for %r: %s", resp.status_code, jql, resp.text[:200])
            raise UpstreamError(resp.status_code, f"Jira API error: {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            logger.error("Jira search returned non-JSON body for %r: %s", jql, resp.text[:200])
            raise ResponseFormatError("Unexpected response format") from exc
        return _issues_from_payload(data, jql)

    def myself(self) -> dict[str, Any]:
        """Return the authenticated user's profile (``/rest/api/3/myself``)."""
        try:
            return self.client.myself()
        except JIRAError as exc:
            status = exc.status_code or 502
            logger.error("Jira /myself failed %s: %s", status, str(exc.text or "")[:200])
            raise UpstreamError(status, f"Jira API error: {status}") from exc
        except requests.RequestException as exc:
            logger.error("Jira /myself request failed: %s", exc)
            raise UpstreamError(502, "Jira API error: 502") from exc


def _issues_from_payload(data: Any, jql: str) -> list[dict[str, Any]]:
    if not isinstance(data, dict):
        logger.error("Unexpected Jira response for %r: %s", jql, json.dumps(data)[:200])
        raise ResponseFormatError("Unexpected response format")
    issues = data.get("issues")
    if issues is None:
        logger.warning("Jira response for %r has no issues list; treating as empty", jql)
        return []
    if not isinstance(issues, list):
        logger.error("Unexpected Jira issues payload for %r: %s", jql, type(issues).__name__)
        raise ResponseFormatError("Unexpected response format")
    return [issue for issue in issues if isinstance(issue, dict)]
