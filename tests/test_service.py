from datetime import UTC, date, datetime

import pytest

from pm_app.core.errors import ErrorResponse, UpstreamError, ValidationError
from pm_app.core.jira_client import JiraAPI
from pm_app.core.models import DateRange, MetricsReport
from pm_app.core.service import (
    IssueService,
    board_jql,
    board_tickets,
    completed_jql,
    compute_metrics,
    created_jql,
    normalize_project_key,
    stale_tickets,
    wip_jql,
)
from pm_app.core.settings import AnalyticsSettings, JiraSettings, Settings

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=UTC)
SETTINGS = Settings(jira=JiraSettings("https://example.atlassian.net", "pm@example.com", "secret"))


def _raw(key, *, created="2024-05-14T10:00:00.000+0000", resolved=None, assignee="Alice", status="Done", **extra):
    fields = {
        "summary": f"Issue {key}",
        "status": {"name": status},
        "assignee": {"displayName": assignee} if assignee else None,
        "creator": {"displayName": "Carol"},
        "created": created,
        "resolutiondate": resolved,
        "labels": ["bug"],
    }
    fields.update(extra)
    return {"key": key, "fields": fields}


class DummyAPI(JiraAPI):
    """Routes each JQL to a canned result by its leading clause."""

    def __init__(self, created=(), completed=(), wip=(), board=(), fail=None):
        self.server = "https://example.atlassian.net"
        self.results = {"created": list(created), "completed": list(completed), "wip": list(wip), "board": list(board)}
        self.fail = fail or {}
        self.calls = []

    @staticmethod
    def _kind(jql):
        if "NOT IN" in jql:
            return "wip"
        if "status in" in jql:
            return "board"
        if "resolutiondate" in jql:
            return "completed"
        return "created"

    def search(self, jql, fields=None, max_results=200):
        kind = self._kind(jql)
        self.calls.append((kind, jql, fields, max_results))
        if kind in self.fail:
            status = self.fail[kind]
            raise UpstreamError(status, f"Jira API error: {status}")
        return self.results[kind]

    def myself(self):
        return {"displayName": "PM Bot", "emailAddress": "pm@example.com"}


def test_jql_shapes():
    dr = DateRange(date(2024, 5, 13), date(2024, 5, 20))
    assert created_jql("NTRVSTA", dr) == (
        'project = NTRVSTA AND created >= "2024-05-13" AND created < "2024-05-21" ORDER BY created DESC'
    )
    assert completed_jql("NTRVSTA", dr) == (
        'project = NTRVSTA AND status = Done AND resolutiondate >= "2024-05-13" '
        'AND resolutiondate < "2024-05-21" ORDER BY resolutiondate DESC'
    )
    assert wip_jql("NTRVSTA") == (
        'project = NTRVSTA AND status NOT IN (Done, Backlog, "To Do", Cancelled, Canceled) ORDER BY status ASC'
    )
    assert 'status in ("In Progress", Testing)' in board_jql("ARC")


def test_normalize_project_key():
    assert normalize_project_key(" arc ") == "ARC"
    for bad in ["", None, "1ABC", "A B", 'X" OR project = Y']:
        with pytest.raises(ValidationError) as exc:
            normalize_project_key(bad)
        assert exc.value.http_status == 400


def test_fetch_collections_runs_three_capped_queries():
    api = DummyAPI(created=[_raw("P-1", status="To Do")], completed=[_raw("P-2")], wip=[_raw("P-3", status="Review")])
    svc = IssueService(api, SETTINGS)
    dr = DateRange(date(2024, 5, 13), date(2024, 5, 20))
    collections = svc.fetch_collections("ntrvsta", dr)
    assert [i.key for i in collections.created] == ["P-1"]
    assert [i.key for i in collections.completed] == ["P-2"]
    assert [i.status for i in collections.wip] == ["Review"]
    assert sorted(kind for kind, *_ in api.calls) == ["completed", "created", "wip"]
    assert all(limit == 200 for *_, limit in api.calls)
    assert all("project = NTRVSTA" in jql for _, jql, _, _ in api.calls)


def test_compute_metrics_scenario_half_done():
    created = [_raw(f"P-{i}", assignee=None if i < 3 else "Alice") for i in range(10)]
    completed = [
        _raw(f"P-{i}", created="2024-05-14T10:00:00.000+0000", resolved="2024-05-16T10:00:00.000+0000")
        for i in range(5)
    ]
    result = compute_metrics(SETTINGS, "NTRVSTA", "7d", now=NOW, api=DummyAPI(created=created, completed=completed))
    assert isinstance(result, MetricsReport)
    assert result.completion_rate == 50
    assert result.avg_time_open == 2
    assert result.created_by_assignee == {"Unassigned": 3, "Alice": 7}
    assert result.tickets_by_label == {"Bug": 10}


def test_compute_metrics_empty_project():
    result = compute_metrics(SETTINGS, "NTRVSTA", "7d", now=NOW, api=DummyAPI())
    data = result.to_dict()
    assert data["startDate"] == "2024-05-13"
    assert data["endDate"] == "2024-05-20"
    assert (data["ticketsCreated"], data["ticketsCompleted"], data["completionRate"]) == (0, 0, 0)
    assert (data["avgTimeOpen"], data["avgVelocity"]) == (0, 0)


def test_wip_failure_is_tolerated():
    api = DummyAPI(
        created=[_raw("P-1")],
        completed=[_raw("P-1", resolved="2024-05-15T10:00:00.000+0000")],
        fail={"wip": 503},
    )
    result = compute_metrics(SETTINGS, "NTRVSTA", "7d", now=NOW, api=api)
    assert isinstance(result, MetricsReport)
    assert result.wip_by_status == []
    assert result.tickets_created == 1


@pytest.mark.parametrize("kind,status", [("created", 401), ("completed", 503)])
def test_primary_query_failure_propagates_status(kind, status):
    result = compute_metrics(SETTINGS, "NTRVSTA", "30d", now=NOW, api=DummyAPI(fail={kind: status}))
    assert isinstance(result, ErrorResponse)
    assert result.http_status == status
    assert result.to_dict() == {"error": f"Jira API error: {status}"}


def test_created_failure_wins_over_completed_failure():
    api = DummyAPI(fail={"created": 401, "completed": 503})
    result = compute_metrics(SETTINGS, "NTRVSTA", "30d", now=NOW, api=api)
    assert result.http_status == 401


def test_missing_credentials_is_a_500():
    result = compute_metrics(Settings(), "NTRVSTA", "7d", now=NOW)
    assert isinstance(result, ErrorResponse)
    assert result.http_status == 500
    assert result.message == "Jira credentials not configured"


def test_unexpected_error_is_generic_500():
    class BrokenAPI(DummyAPI):
        def search(self, jql, fields=None, max_results=200):
            raise KeyError("boom")

    result = compute_metrics(SETTINGS, "NTRVSTA", "7d", now=NOW, api=BrokenAPI())
    assert result == ErrorResponse(500, "Failed to fetch analytics")


def test_board_and_stale_tickets():
    board = [
        _raw("P-1", status="In Progress", updated="2024-05-10T08:00:00.000+0000"),
        _raw("P-2", status="Testing", updated="2024-05-19T08:00:00.000+0000", assignee=None),
        _raw("P-3", status="In Progress", updated="2024-05-01T08:00:00.000+0000"),
    ]
    api = DummyAPI(board=board)
    tickets = board_tickets(SETTINGS, "NTRVSTA", api=api)
    assert [t.key for t in tickets] == ["P-1", "P-2", "P-3"]
    assert tickets[1].assignee == "Unassigned"
    assert tickets[0].url == "https://example.atlassian.net/browse/P-1"
    assert api.calls[0][3] == 50

    stale = stale_tickets(SETTINGS, "NTRVSTA", today=date(2024, 5, 20), api=api)
    assert [(t.key, t.days_stale) for t in stale] == [("P-3", 19), ("P-1", 10)]
    assert stale[0].to_dict()["daysStale"] == 19


def test_stale_days_use_the_dashboard_timezone():
    settings = Settings(jira=SETTINGS.jira, analytics=AnalyticsSettings(timezone="America/Santiago"))
    # 01:00 UTC on May 16 is still May 15 in Santiago
    api = DummyAPI(board=[_raw("P-1", status="In Progress", updated="2024-05-16T01:00:00.000+0000")])
    assert board_tickets(settings, "NTRVSTA", api=api)[0].updated == date(2024, 5, 15)

    stale = stale_tickets(settings, "NTRVSTA", days_threshold=4, today=date(2024, 5, 20), api=api)
    assert [(t.key, t.days_stale) for t in stale] == [("P-1", 5)]
    assert stale_tickets(SETTINGS, "NTRVSTA", days_threshold=4, today=date(2024, 5, 20), api=api) == []


def test_stale_tickets_error_mapping():
    result = stale_tickets(SETTINGS, "NTRVSTA", api=DummyAPI(fail={"board": 502}))
    assert result == ErrorResponse(502, "Jira API error: 502")


def test_check_connection():
    svc = IssueService(DummyAPI(), SETTINGS)
    result = svc.check_connection()
    assert result["ok"] is True
    assert result["user"] == {"displayName": "PM Bot", "email": "pm@example.com"}
    assert result["envCheck"]["emailValue"] == "pm@ex..."
    assert result["envCheck"]["hasApiToken"] is True
