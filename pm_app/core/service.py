"""IssueService: fixed-shape Jira queries feeding the analytics and board views."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from typing import Any

import pytz

from pm_app.analytics.report import build_metrics_report

from .config import (
    BOARD_FIELDS,
    BOARD_RESULT_CAP,
    BOARD_STATUSES,
    COMPLETED_FIELDS,
    CREATED_FIELDS,
    DONE_STATUS,
    SEARCH_RESULT_CAP,
    WIP_EXCLUDED_STATUSES,
    WIP_FIELDS,
)
from .date_range import resolve_date_range
from .errors import DashboardError, ErrorResponse, ValidationError
from .jira_client import JiraAPI
from .mappers import map_board_ticket, map_issue
from .models import BoardTicket, DateRange, IssueCollections, IssueModel, MetricsReport
from .settings import Settings
from .stale import compute_stale
from .status import jql_value_list

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]
PROJECT_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def normalize_project_key(project_key: str | None) -> str:
    key = (project_key or "").strip()
    if not PROJECT_KEY_RE.match(key):
        raise ValidationError(f"Invalid project key: {project_key!r}")
    return key.upper()


def _day_bounds(date_range: DateRange) -> tuple[str, str]:
    # Strict upper bound on the following day keeps the end date inclusive.
    return date_range.start.isoformat(), (date_range.end + timedelta(days=1)).isoformat()


def created_jql(project_key: str, date_range: DateRange) -> str:
    start, end_plus = _day_bounds(date_range)
    return f'project = {project_key} AND created >= "{start}" AND created < "{end_plus}" ORDER BY created DESC'


def completed_jql(project_key: str, date_range: DateRange) -> str:
    start, end_plus = _day_bounds(date_range)
    return (
        f"project = {project_key} AND status = {DONE_STATUS} "
        f'AND resolutiondate >= "{start}" AND resolutiondate < "{end_plus}" ORDER BY resolutiondate DESC'
    )


def wip_jql(project_key: str) -> str:
    return f"project = {project_key} AND status NOT IN ({jql_value_list(WIP_EXCLUDED_STATUSES)}) ORDER BY status ASC"


def board_jql(project_key: str) -> str:
    return (
        f"project = {project_key} AND status in ({jql_value_list(BOARD_STATUSES)}) "
        "AND assignee IS NOT EMPTY ORDER BY updated DESC"
    )


class IssueService:
    def __init__(self, api: JiraAPI, settings: Settings | None = None):
        self.api = api
        self.settings = settings or Settings()
        self._tz = pytz.timezone(self.settings.analytics.timezone)

    # ------------------ Fetch Methods ------------------
    def _search_issues(self, jql: str, fields: list[str], limit: int = SEARCH_RESULT_CAP) -> list[IssueModel]:
        raw = self.api.search(jql, fields=fields, max_results=limit)
        return [map_issue(r) for r in raw]

    def fetch_created_in_range(self, project_key: str, date_range: DateRange) -> list[IssueModel]:
        return self._search_issues(created_jql(project_key, date_range), CREATED_FIELDS)

    def fetch_completed_in_range(self, project_key: str, date_range: DateRange) -> list[IssueModel]:
        return self._search_issues(completed_jql(project_key, date_range), COMPLETED_FIELDS)

    def fetch_work_in_progress(self, project_key: str) -> list[IssueModel]:
        """WIP issues; any failure degrades to an empty list."""
        jql = wip_jql(project_key)
        try:
            return self._search_issues(jql, WIP_FIELDS)
        except Exception as exc:
            logger.warning("WIP query failed for %s, continuing without it: %s", project_key, exc)
            return []

    def fetch_collections(
        self,
        project_key: str,
        date_range: DateRange,
        *,
        progress: ProgressCallback | None = None,
    ) -> IssueCollections:
        """Run the created, completed and WIP queries concurrently.

        The queries are independent; created failures win over completed
        failures so the reported error does not depend on timing.
        """
        project_key = normalize_project_key(project_key)
        if progress:
            progress(f"Querying {project_key} issues for {date_range.start} to {date_range.end}", 0, 3)
        with ThreadPoolExecutor(max_workers=3) as pool:
            created_f = pool.submit(self.fetch_created_in_range, project_key, date_range)
            completed_f = pool.submit(self.fetch_completed_in_range, project_key, date_range)
            wip_f = pool.submit(self.fetch_work_in_progress, project_key)
            created = created_f.result()
            if progress:
                progress("Created issues loaded", 1, 3)
            completed = completed_f.result()
            if progress:
                progress("Completed issues loaded", 2, 3)
            wip = wip_f.result()
            if progress:
                progress("Work in progress loaded", 3, 3)
        logger.info(
            "Fetched %s: created=%d completed=%d wip=%d",
            project_key,
            len(created),
            len(completed),
            len(wip),
        )
        return IssueCollections(created=created, completed=completed, wip=wip)

    def metrics_report(
        self,
        project_key: str,
        range_keyword: str | None,
        *,
        now: datetime | None = None,
        progress: ProgressCallback | None = None,
    ) -> MetricsReport:
        date_range = resolve_date_range(range_keyword, now=now, tz=self._tz)
        collections = self.fetch_collections(project_key, date_range, progress=progress)
        return build_metrics_report(
            collections,
            date_range,
            tz=self._tz,
            avg_open_dated_only=self.settings.analytics.avg_open_dated_only,
        )

    def fetch_board(self, project_key: str) -> list[BoardTicket]:
        project_key = normalize_project_key(project_key)
        raw = self.api.search(board_jql(project_key), fields=BOARD_FIELDS, max_results=BOARD_RESULT_CAP)
        return [map_board_ticket(r, self.api.server, self._tz) for r in raw]

    def fetch_stale(
        self,
        project_key: str,
        *,
        days_threshold: int | None = None,
        today: date | None = None,
    ) -> list[BoardTicket]:
        threshold = self.settings.analytics.stale_days if days_threshold is None else days_threshold
        today = today or datetime.now(tz=self._tz).date()
        return compute_stale(self.fetch_board(project_key), threshold, today)

    def check_connection(self) -> dict[str, Any]:
        jira = self.settings.jira
        env_check = {
            "hasEmail": bool(jira.email),
            "hasApiToken": bool(jira.token),
            "hasBaseUrl": bool(jira.server),
            "emailValue": f"{jira.email[:5]}..." if jira.email else "undefined",
            "baseUrlValue": jira.server or "undefined",
        }
        try:
            me = self.api.myself()
        except DashboardError as exc:
            return {"ok": False, "status": exc.http_status, "envCheck": env_check, "user": None}
        return {
            "ok": True,
            "status": 200,
            "envCheck": env_check,
            "user": {"displayName": me.get("displayName"), "email": me.get("emailAddress")},
        }


# ------------------ Boundary functions ------------------
def _service(settings: Settings, api: JiraAPI | None) -> IssueService:
    return IssueService(api or JiraAPI.from_settings(settings.jira), settings)


def compute_metrics(
    settings: Settings,
    project_key: str,
    range_keyword: str | None,
    *,
    now: datetime | None = None,
    api: JiraAPI | None = None,
    progress: ProgressCallback | None = None,
) -> MetricsReport | ErrorResponse:
    """Analytics for one project and range, or a status-coded error value."""
    try:
        return _service(settings, api).metrics_report(project_key, range_keyword, now=now, progress=progress)
    except DashboardError as exc:
        logger.error("Analytics for %s (%s) failed: %s", project_key, range_keyword, exc.message)
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error computing analytics for %s", project_key)
        return ErrorResponse(500, "Failed to fetch analytics")


def board_tickets(
    settings: Settings,
    project_key: str,
    *,
    api: JiraAPI | None = None,
) -> list[BoardTicket] | ErrorResponse:
    try:
        return _service(settings, api).fetch_board(project_key)
    except DashboardError as exc:
        logger.error("Board fetch for %s failed: %s", project_key, exc.message)
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error fetching board for %s", project_key)
        return ErrorResponse(500, "Failed to fetch Jira tickets")


def stale_tickets(
    settings: Settings,
    project_key: str,
    *,
    days_threshold: int | None = None,
    today: date | None = None,
    api: JiraAPI | None = None,
) -> list[BoardTicket] | ErrorResponse:
    try:
        return _service(settings, api).fetch_stale(project_key, days_threshold=days_threshold, today=today)
    except DashboardError as exc:
        logger.error("Stale fetch for %s failed: %s", project_key, exc.message)
        return ErrorResponse.from_exception(exc)
    except Exception:
        logger.exception("Error fetching stale tickets for %s", project_key)
        return ErrorResponse(500, "Failed to fetch stale tickets")
