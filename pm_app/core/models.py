"""Domain data models for issues, date ranges, and metrics reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(slots=True)
class IssueModel:
    key: str
    summary: str | None
    status: str | None
    assignee: str | None
    creator: str | None
    created: datetime | None
    updated: datetime | None = None
    resolution_date: datetime | None = None
    labels: list[str] = field(default_factory=list)


@dataclass(slots=True)
class IssueCollections:
    """The three result sets one analytics request is computed from."""

    created: list[IssueModel] = field(default_factory=list)
    completed: list[IssueModel] = field(default_factory=list)
    wip: list[IssueModel] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        """Length of the range in days, never below one."""
        return max(1, (self.end - self.start).days)

    def to_dict(self) -> dict[str, str]:
        return {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()}


@dataclass(slots=True, frozen=True)
class WeeklyBucket:
    week_start: date
    week: str
    created: int
    completed: int

    def to_dict(self) -> dict[str, object]:
        return {"week": self.week, "created": self.created, "completed": self.completed}


@dataclass(slots=True, frozen=True)
class StatusCount:
    status: str
    count: int


@dataclass(slots=True)
class MetricsReport:
    date_range: DateRange
    tickets_created: int = 0
    tickets_completed: int = 0
    completion_rate: int = 0
    avg_time_open: int = 0
    avg_velocity: float = 0.0
    created_by_assignee: dict[str, int] = field(default_factory=dict)
    completed_by_assignee: dict[str, int] = field(default_factory=dict)
    tickets_by_label: dict[str, int] = field(default_factory=dict)
    label_variants: dict[str, list[str]] = field(default_factory=dict)
    weekly_data: list[WeeklyBucket] = field(default_factory=list)
    wip_by_status: list[StatusCount] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            **self.date_range.to_dict(),
            "ticketsCreated": self.tickets_created,
            "ticketsCompleted": self.tickets_completed,
            "completionRate": self.completion_rate,
            "avgTimeOpen": self.avg_time_open,
            "avgVelocity": self.avg_velocity,
            "createdByAssignee": dict(self.created_by_assignee),
            "completedByAssignee": dict(self.completed_by_assignee),
            "ticketsByLabel": dict(self.tickets_by_label),
            "labelVariants": {k: list(v) for k, v in self.label_variants.items()},
            "weeklyData": [b.to_dict() for b in self.weekly_data],
            "wipByStatus": [{"status": s.status, "count": s.count} for s in self.wip_by_status],
        }


@dataclass(slots=True)
class BoardTicket:
    key: str
    summary: str | None
    status: str | None
    assignee: str
    updated: date | None
    url: str
    days_stale: int | None = None

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "key": self.key,
            "summary": self.summary,
            "status": self.status,
            "assignee": self.assignee,
            "updated": self.updated.isoformat() if self.updated else None,
            "url": self.url,
        }
        if self.days_stale is not None:
            out["daysStale"] = self.days_stale
        return out
