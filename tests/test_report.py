from datetime import UTC, date, datetime, timedelta

import pytz

from pm_app.analytics.report import build_metrics_report
from pm_app.core.models import DateRange, IssueCollections, IssueModel


def _issue(key, *, created=None, resolved=None, assignee=None, labels=(), status="Done"):
    return IssueModel(
        key=key,
        summary=f"Issue {key}",
        status=status,
        assignee=assignee,
        creator=None,
        created=created,
        resolution_date=resolved,
        labels=list(labels),
    )


RANGE_7D = DateRange(date(2024, 5, 13), date(2024, 5, 20))


def test_empty_collections_give_zero_report():
    report = build_metrics_report(IssueCollections(), RANGE_7D)
    data = report.to_dict()
    assert data["ticketsCreated"] == 0
    assert data["ticketsCompleted"] == 0
    assert data["completionRate"] == 0
    assert data["avgTimeOpen"] == 0
    assert data["avgVelocity"] == 0
    assert data["createdByAssignee"] == {}
    assert data["completedByAssignee"] == {}
    assert data["ticketsByLabel"] == {}
    assert data["wipByStatus"] == []
    assert [w["created"] for w in data["weeklyData"]] == [0, 0]


def test_half_completed_two_days_each():
    t0 = datetime(2024, 5, 14, 9, 0, tzinfo=UTC)
    created = [_issue(f"P-{i}", created=t0, assignee="Alice" if i % 2 else None) for i in range(10)]
    completed = [
        _issue(f"P-{i}", created=t0, resolved=t0 + timedelta(days=2), assignee="Bob") for i in range(5)
    ]
    report = build_metrics_report(IssueCollections(created=created, completed=completed), RANGE_7D)
    assert report.avg_time_open == 2
    assert report.completion_rate == 50
    assert sum(report.created_by_assignee.values()) == report.tickets_created == 10
    assert sum(report.completed_by_assignee.values()) == report.tickets_completed == 5
    assert report.created_by_assignee == {"Unassigned": 5, "Alice": 5}


def test_velocity_over_fourteen_days():
    dr = DateRange(date(2024, 5, 6), date(2024, 5, 20))
    t0 = datetime(2024, 5, 7, tzinfo=UTC)
    completed = [_issue(f"P-{i}", created=t0, resolved=t0 + timedelta(days=1)) for i in range(7)]
    report = build_metrics_report(IssueCollections(completed=completed), dr)
    assert report.avg_velocity == 3.5


def test_label_case_variants_merge():
    t0 = datetime(2024, 5, 14, tzinfo=UTC)
    created = [_issue("P-1", created=t0, labels=["bug"]), _issue("P-2", created=t0, labels=["Bug"])]
    report = build_metrics_report(IssueCollections(created=created), RANGE_7D)
    assert report.tickets_by_label == {"Bug": 2}
    assert report.label_variants == {"Bug": ["Bug", "bug"]}


def test_avg_time_open_denominator_is_configurable():
    t0 = datetime(2024, 5, 14, tzinfo=UTC)
    completed = [
        _issue("P-1", created=t0, resolved=t0 + timedelta(days=6)),
        _issue("P-2", created=t0, resolved=None),
    ]
    collections = IssueCollections(completed=completed)
    assert build_metrics_report(collections, RANGE_7D).avg_time_open == 3
    assert build_metrics_report(collections, RANGE_7D, avg_open_dated_only=True).avg_time_open == 6


def test_weekly_and_wip_in_report():
    tz = pytz.timezone("America/Santiago")
    created = [_issue("P-1", created=datetime(2024, 5, 20, 1, 0, tzinfo=UTC))]
    wip = [_issue("P-9", status="In Progress"), _issue("P-8", status="Review"), _issue("P-7", status="Review")]
    report = build_metrics_report(IssueCollections(created=created, wip=wip), RANGE_7D, tz=tz)
    # 01:00 UTC on the 20th is still Sunday the 19th in Santiago
    assert [(w.week, w.created) for w in report.weekly_data] == [("May 13", 1), ("May 20", 0)]
    assert report.to_dict()["wipByStatus"] == [
        {"status": "Review", "count": 2},
        {"status": "In Progress", "count": 1},
    ]
