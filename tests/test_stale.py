from datetime import date

from pm_app.core.mappers import tickets_to_dataframe
from pm_app.core.models import BoardTicket
from pm_app.core.stale import compute_stale


def _ticket(key, updated, assignee="Alice"):
    return BoardTicket(
        key=key,
        summary=f"Ticket {key}",
        status="In Progress",
        assignee=assignee,
        updated=updated,
        url=f"https://example.atlassian.net/browse/{key}",
    )


def test_threshold_is_exclusive():
    today = date(2024, 5, 20)
    tickets = [_ticket("P-1", date(2024, 5, 16)), _ticket("P-2", date(2024, 5, 15)), _ticket("P-3", None)]
    stale = compute_stale(tickets, 4, today)
    assert [(t.key, t.days_stale) for t in stale] == [("P-2", 5)]
    assert tickets[1].days_stale is None


def test_sorted_most_stale_first():
    today = date(2024, 5, 20)
    tickets = [_ticket("P-1", date(2024, 5, 10)), _ticket("P-2", date(2024, 4, 1)), _ticket("P-3", date(2024, 5, 1))]
    assert [t.key for t in compute_stale(tickets, 0, today)] == ["P-2", "P-3", "P-1"]


def test_tickets_frame_columns():
    df = tickets_to_dataframe(compute_stale([_ticket("P-1", date(2024, 5, 1))], 4, date(2024, 5, 20)))
    assert list(df.columns) == ["key", "summary", "status", "assignee", "updated", "days_stale", "url"]
    assert df.loc[0, "days_stale"] == 19
