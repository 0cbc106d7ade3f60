"""
View models composed from the bucketer, filters and aggregator.

The presentation layer owns all state (current filters, selected period,
view mode) and passes it in on every call; nothing here is remembered
between calls.

Usage:
    from fieldledger.dashboard import build_calendar_view, build_finance_view

    view = build_finance_view(
        jobs,
        FilterCriteria(include_statuses={"completed"}),
        reference=date.today(),
        granularity="month",
        group_by="group_key",
        expense_ratio=0.33,
    )
    print(view.result.total_profit)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from fieldledger.aggregation import ExpenseRatio, GroupBy, aggregate
from fieldledger.bucketing import advance, bucket, daily_counts, interval_for, normalize_timestamp
from fieldledger.domain.models import AggregateResult, FilterCriteria, Granularity, Interval
from fieldledger.filtering import SortOption, filter_records, sort_records
from fieldledger.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class FinanceView:
    """Filtered records of the selected period and their roll-up."""

    interval: Optional[Interval]
    records: Tuple[Any, ...]
    result: AggregateResult


@dataclass(frozen=True)
class CalendarView:
    """One day, week or month of the scheduling calendar."""

    reference: Union[date, datetime]
    granularity: Granularity
    interval: Interval
    records: Tuple[Any, ...]
    counts: Dict[date, int] = field(default_factory=dict)
    previous: Optional[Union[date, datetime]] = None
    next: Optional[Union[date, datetime]] = None


def build_finance_view(
    records: Iterable[Any],
    criteria: Optional[FilterCriteria] = None,
    *,
    reference: Any = None,
    granularity: Optional[Union[Granularity, str]] = None,
    group_by: Optional[GroupBy] = None,
    sort: Optional[Union[SortOption, str]] = None,
    tz: Optional[tzinfo] = None,
    date_field: str = "occurs_at",
    name_field: str = "title",
    expense_ratio: ExpenseRatio = 0.0,
    fixed_expenses: float = 0.0,
    hours_per_record: Optional[float] = None,
    parts_ratio: float = 0.0,
) -> FinanceView:
    """
    Filter, restrict to the selected period, sort, then aggregate.

    `reference` and `granularity` go together: pass both to restrict the
    records to the day, week or month around `reference`, or neither.
    """
    if (reference is None) != (granularity is None):
        raise ValueError("reference and granularity must be given together")

    selected = filter_records(records, criteria)

    interval: Optional[Interval] = None
    if reference is not None:
        interval = interval_for(reference, granularity, tz)  # type: ignore[arg-type]
        selected = bucket(selected, interval, date_field)

    if sort is not None:
        selected = sort_records(selected, sort, date_field=date_field, name_field=name_field)

    result = aggregate(
        selected,
        group_by,
        expense_ratio=expense_ratio,
        fixed_expenses=fixed_expenses,
        hours_per_record=hours_per_record,
        parts_ratio=parts_ratio,
    )
    log.info(
        "Finance view built",
        extra={
            "records": result.record_count,
            "groups": len(result.groups),
            "interval_start": interval.start.isoformat() if interval else None,
            "interval_end": interval.end.isoformat() if interval else None,
        },
    )
    return FinanceView(interval=interval, records=tuple(selected), result=result)


def build_calendar_view(
    records: Iterable[Any],
    reference: Union[date, datetime, str],
    granularity: Union[Granularity, str],
    tz: Optional[tzinfo] = None,
    date_field: str = "occurs_at",
) -> CalendarView:
    """
    Records of the period around `reference`, per-day counts, and prev/next navigation.
    """
    unit = Granularity(granularity)
    if isinstance(reference, str):
        parsed = normalize_timestamp(reference, tz)
        if parsed is None:
            raise ValueError(f"Unparseable reference date: {reference!r}")
        reference = parsed

    interval = interval_for(reference, unit, tz)
    items = list(records)
    in_period = bucket(items, interval, date_field)
    log.info(
        "Calendar view built",
        extra={"granularity": unit.value, "records": len(in_period), "input": len(items)},
    )
    return CalendarView(
        reference=reference,
        granularity=unit,
        interval=interval,
        records=tuple(in_period),
        counts=daily_counts(in_period, interval, date_field),
        previous=advance(reference, unit, -1),
        next=advance(reference, unit, 1),
    )


__all__ = ["FinanceView", "CalendarView", "build_finance_view", "build_calendar_view"]
