from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from fieldledger.bucketing import interval_for
from fieldledger.dashboard import build_calendar_view, build_finance_view
from fieldledger.domain.models import DatedRecord, FilterCriteria, Granularity

FEBRUARY_2024_DAYS = 29


def test_finance_view_filters_buckets_and_aggregates(jobs) -> None:
    view = build_finance_view(
        jobs,
        FilterCriteria(include_statuses={"completed", "pending", "paid"}),
        reference=date(2024, 3, 20),
        granularity="month",
        group_by="group_key",
        expense_ratio=0.33,
    )

    assert view.interval is not None
    assert view.interval.start == datetime(2024, 3, 1)
    assert [r.id for r in view.records] == ["J1", "J2"]
    assert view.result.total_amount == pytest.approx(1500.0)
    assert view.result.total_profit == pytest.approx(755.0)
    assert [g.key for g in view.result.groups] == ["Alex", "Maria"]


def test_finance_view_without_period_uses_all_filtered_records(jobs) -> None:
    view = build_finance_view(jobs, sort="revenue-high")

    assert view.interval is None
    assert [r.id for r in view.records] == ["J3", "J1", "J2", "J4"]
    assert view.result.record_count == 4


def test_finance_view_requires_reference_and_granularity_together(jobs) -> None:
    with pytest.raises(ValueError):
        build_finance_view(jobs, reference=date(2024, 3, 1))
    with pytest.raises(ValueError):
        build_finance_view(jobs, granularity="week")


def test_calendar_month_view_with_navigation(calendar_entries) -> None:
    view = build_calendar_view(calendar_entries, "2024-02-10", "month")

    assert view.granularity is Granularity.MONTH
    assert view.reference == datetime(2024, 2, 10)
    assert [r.id for r in view.records] == ["T2", "T3", "T4"]
    assert len(view.counts) == FEBRUARY_2024_DAYS
    assert view.previous == datetime(2024, 1, 10)
    assert view.next == datetime(2024, 3, 10)


def test_calendar_week_view_keeps_date_reference(calendar_entries) -> None:
    view = build_calendar_view(calendar_entries, date(2024, 2, 29), Granularity.WEEK)

    assert view.interval.start == datetime(2024, 2, 26)
    assert [r.id for r in view.records] == ["T3", "T4", "T6"]
    assert view.previous == date(2024, 2, 22)
    assert view.next == date(2024, 3, 7)
    assert view.counts[date(2024, 2, 29)] == 2


def test_calendar_view_rejects_unreadable_reference(calendar_entries) -> None:
    with pytest.raises(ValueError):
        build_calendar_view(calendar_entries, "next tuesday", "day")


def test_calendar_view_reads_offset_reference_in_target_zone() -> None:
    reference = "2024-03-10T23:30:00-05:00"
    records = [
        DatedRecord(id="late", occurs_at="2024-03-11T02:00:00Z"),
        DatedRecord(id="early", occurs_at="2024-03-10T12:00:00Z"),
    ]

    view = build_calendar_view(records, reference, "day", tz=timezone.utc)

    assert view.interval == interval_for(reference, "day", tz=timezone.utc)
    assert view.interval.start == datetime(2024, 3, 11, tzinfo=timezone.utc)
    assert [r.id for r in view.records] == ["late"]
    assert view.previous == datetime(2024, 3, 10, 4, 30, tzinfo=timezone.utc)
    assert view.next == datetime(2024, 3, 12, 4, 30, tzinfo=timezone.utc)
