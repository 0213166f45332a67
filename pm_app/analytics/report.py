"""Assemble a MetricsReport from the three issue collections (no I/O)."""

from __future__ import annotations

import pytz

from pm_app.analytics.aggregations.assignee import count_by_assignee
from pm_app.analytics.aggregations.labels import count_by_label, label_variants
from pm_app.analytics.aggregations.status import wip_by_status
from pm_app.analytics.metrics.rates import average_time_open, average_velocity, completion_rate
from pm_app.analytics.metrics.weekly import weekly_series
from pm_app.core.config import TIMEZONE
from pm_app.core.mappers import issues_to_dataframe
from pm_app.core.models import DateRange, IssueCollections, MetricsReport


def build_metrics_report(
    collections: IssueCollections,
    date_range: DateRange,
    *,
    tz=None,
    avg_open_dated_only: bool = False,
) -> MetricsReport:
    tz = tz or pytz.timezone(TIMEZONE)
    created = issues_to_dataframe(collections.created)
    completed = issues_to_dataframe(collections.completed)
    wip = issues_to_dataframe(collections.wip)

    tickets_created = len(created)
    tickets_completed = len(completed)
    return MetricsReport(
        date_range=date_range,
        tickets_created=tickets_created,
        tickets_completed=tickets_completed,
        completion_rate=completion_rate(tickets_created, tickets_completed),
        avg_time_open=average_time_open(completed, dated_only=avg_open_dated_only),
        avg_velocity=average_velocity(tickets_completed, date_range),
        created_by_assignee=count_by_assignee(created),
        completed_by_assignee=count_by_assignee(completed),
        tickets_by_label=count_by_label(created),
        label_variants=label_variants(created),
        weekly_data=weekly_series(created, completed, date_range, tz=tz),
        wip_by_status=wip_by_status(wip),
    )
