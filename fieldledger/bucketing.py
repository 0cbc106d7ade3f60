"""
Date bucketing for the scheduling calendar and the dashboard date filters.

Computes day / ISO-week / month intervals around a reference date, keeps the
records that fall inside an interval, and steps a reference date back and
forth one period at a time.

Time zone policy is explicit: every operation takes an optional `tz`.
With `tz=None` no conversion happens (naive stays naive, aware values keep
their wall-clock time and lose the offset). With a `tz`, naive input is
read as wall-clock time in that zone and aware input is converted into it.

Usage:
    from fieldledger.bucketing import advance, bucket, interval_for

    week = interval_for("2024-03-06", "week")
    jobs_this_week = bucket(jobs, week)
    next_week = advance(date(2024, 3, 6), "week", +1)
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, TypeVar, Union

from fieldledger.domain.models import Granularity, Interval
from fieldledger.utils.fields import get_field
from fieldledger.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R")
DateLike = TypeVar("DateLike", date, datetime)


class DatePreset(str, Enum):
    """Quick ranges offered by the dashboard date filter."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this-week"
    LAST_WEEK = "last-week"
    THIS_MONTH = "this-month"
    LAST_MONTH = "last-month"
    LAST_30_DAYS = "last-30-days"
    LAST_90_DAYS = "last-90-days"
    THIS_YEAR = "this-year"
    LAST_YEAR = "last-year"
    NEXT_WEEK = "next-week"
    NEXT_MONTH = "next-month"
    ALL_TIME = "all-time"


def normalize_timestamp(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Convert a loosely typed timestamp into a datetime, or None if it cannot be read.

    Accepts ISO-8601 strings (date-only or date-time, including a trailing
    "Z"), `datetime` and `date` values. Never raises for bad input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            instant = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if tz is None:
        return instant.replace(tzinfo=None) if instant.tzinfo is not None else instant
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def _start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=23, minute=59, second=59, microsecond=999_999)


def _require_instant(reference: Any, tz: Optional[tzinfo]) -> datetime:
    instant = normalize_timestamp(reference, tz)
    if instant is None:
        raise ValueError(f"Unparseable reference date: {reference!r}")
    return instant


def interval_for(
    reference: Any,
    granularity: Union[Granularity, str],
    tz: Optional[tzinfo] = None,
) -> Interval:
    """
    Inclusive interval of the day, ISO week (Monday-first) or month containing `reference`.

    Raises
    ------
    ValueError
        If `reference` cannot be parsed or `granularity` is unknown.
    """
    unit = Granularity(granularity)
    day = _start_of_day(_require_instant(reference, tz))

    if unit is Granularity.DAY:
        return Interval(start=day, end=_end_of_day(day))
    if unit is Granularity.WEEK:
        monday = day - timedelta(days=day.weekday())
        return Interval(start=monday, end=_end_of_day(monday + timedelta(days=6)))

    first = day.replace(day=1)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return Interval(start=first, end=_end_of_day(first.replace(day=last_day)))


def bucket(records: Iterable[R], interval: Interval, field: str = "occurs_at") -> List[R]:
    """
    Records whose `field` falls inside `interval`, in input order.

    Timestamps are normalized into the interval's time zone (or left naive
    for a naive interval). Records with missing or unparseable timestamps
    are dropped.
    """
    kept: List[R] = []
    dropped = 0
    for record in records:
        instant = normalize_timestamp(get_field(record, field), interval.tzinfo)
        if instant is None:
            dropped += 1
            continue
        if interval.contains(instant):
            kept.append(record)
    if dropped:
        log.debug(
            "Dropped records with unreadable dates",
            extra={"dropped": dropped, "field": field},
        )
    return kept


def _add_months(value: DateLike, months: int) -> DateLike:
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def advance(
    reference: Union[date, datetime, str],
    granularity: Union[Granularity, str],
    direction: int,
    tz: Optional[tzinfo] = None,
) -> Union[date, datetime]:
    """
    Step `reference` one day, one week or one calendar month forwards (+1) or back (-1).

    Month steps clamp to the last valid day, so Jan 31 + 1 month is the last
    day of February. Dates stay dates and datetimes stay datetimes; strings
    are parsed (into `tz` when given) and returned as datetimes.
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or +1, got {direction!r}")
    unit = Granularity(granularity)
    value: Union[date, datetime]
    value = _require_instant(reference, tz) if isinstance(reference, str) else reference
    if not isinstance(value, date):
        raise ValueError(f"Unsupported reference date: {reference!r}")

    if unit is Granularity.DAY:
        return value + timedelta(days=direction)
    if unit is Granularity.WEEK:
        return value + timedelta(weeks=direction)
    return _add_months(value, direction)


def preset_interval(
    preset: Union[DatePreset, str],
    today: Any,
    tz: Optional[tzinfo] = None,
) -> Optional[Interval]:
    """
    Interval for a dashboard quick-range relative to `today`.

    "this-*" ranges end at the end of today rather than the end of the
    period. Returns None for "all-time" (no date restriction).
    """
    choice = DatePreset(preset)
    if choice is DatePreset.ALL_TIME:
        return None

    day = _start_of_day(_require_instant(today, tz))
    end_today = _end_of_day(day)
    one_day = timedelta(days=1)

    if choice is DatePreset.TODAY:
        return Interval(start=day, end=end_today)
    if choice is DatePreset.YESTERDAY:
        return Interval(start=day - one_day, end=_end_of_day(day - one_day))
    if choice is DatePreset.THIS_WEEK:
        return Interval(start=day - timedelta(days=day.weekday()), end=end_today)
    if choice is DatePreset.LAST_WEEK:
        return interval_for(day - timedelta(days=7), Granularity.WEEK, tz)
    if choice is DatePreset.THIS_MONTH:
        return Interval(start=day.replace(day=1), end=end_today)
    if choice is DatePreset.LAST_MONTH:
        return interval_for(day.replace(day=1) - one_day, Granularity.MONTH, tz)
    if choice is DatePreset.LAST_30_DAYS:
        return Interval(start=day - timedelta(days=30), end=end_today)
    if choice is DatePreset.LAST_90_DAYS:
        return Interval(start=day - timedelta(days=90), end=end_today)
    if choice is DatePreset.THIS_YEAR:
        return Interval(start=day.replace(month=1, day=1), end=end_today)
    if choice is DatePreset.LAST_YEAR:
        jan_first = day.replace(year=day.year - 1, month=1, day=1)
        return Interval(start=jan_first, end=_end_of_day(jan_first.replace(month=12, day=31)))
    if choice is DatePreset.NEXT_WEEK:
        return Interval(start=day + one_day, end=_end_of_day(day + timedelta(days=7)))
    # next-month
    return Interval(start=day + one_day, end=_end_of_day(day + timedelta(days=30)))


def daily_counts(
    records: Iterable[Any], interval: Interval, field: str = "occurs_at"
) -> Dict[date, int]:
    """
    Number of records per calendar day of `interval`, zero-filled.

    Drives the month view's "has jobs" markers.
    """
    counts: Dict[date, int] = {day: 0 for day in interval.days()}
    for record in bucket(records, interval, field):
        instant = normalize_timestamp(get_field(record, field), interval.tzinfo)
        counts[instant.date()] += 1  # type: ignore[union-attr]
    return counts


__all__ = [
    "DatePreset",
    "normalize_timestamp",
    "interval_for",
    "bucket",
    "advance",
    "preset_interval",
    "daily_counts",
]
