"""
Record filtering and sorting for the jobs, payments and job-source tables.

`filter_records` applies every active criterion with logical AND, so adding
criteria can only shrink the result. `sort_records` mirrors the table sort
menu (newest/oldest, name, revenue).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

from fieldledger.bucketing import normalize_timestamp
from fieldledger.domain.models import FilterCriteria
from fieldledger.utils.fields import get_field
from fieldledger.utils.logging import get_logger

log = get_logger(__name__)

R = TypeVar("R")
Predicate = Callable[[Any], bool]


class SortOption(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    REVENUE_HIGH = "revenue-high"
    REVENUE_LOW = "revenue-low"


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _search_predicate(text: str, fields: Iterable[str]) -> Predicate:
    needle = text.casefold()
    names = tuple(fields)

    def matches(record: Any) -> bool:
        for name in names:
            value = get_field(record, name)
            if value is not None and needle in str(value).casefold():
                return True
        return False

    return matches


def _build_predicates(criteria: FilterCriteria) -> List[Predicate]:
    predicates: List[Predicate] = []

    if criteria.search_text and criteria.search_text.strip():
        predicates.append(_search_predicate(criteria.search_text.strip(), criteria.search_fields))

    if criteria.include_groups:
        groups = criteria.include_groups
        predicates.append(lambda record: get_field(record, "group_key") in groups)

    if criteria.include_statuses:
        statuses = {status.casefold() for status in criteria.include_statuses}

        def status_matches(record: Any) -> bool:
            status = get_field(record, "status")
            return status is not None and str(status).casefold() in statuses

        predicates.append(status_matches)

    if criteria.amount_range is not None:
        low, high = criteria.amount_range

        def amount_matches(record: Any) -> bool:
            amount = _as_number(get_field(record, "amount"))
            if amount is None:
                return False
            if low is not None and amount < low:
                return False
            if high is not None and amount > high:
                return False
            return True

        predicates.append(amount_matches)

    if criteria.date_interval is not None:
        interval = criteria.date_interval
        field = criteria.date_field

        def date_matches(record: Any) -> bool:
            instant = normalize_timestamp(get_field(record, field), interval.tzinfo)
            return instant is not None and interval.contains(instant)

        predicates.append(date_matches)

    return predicates


def filter_records(records: Iterable[R], criteria: Optional[FilterCriteria] = None) -> List[R]:
    """
    Records satisfying every active criterion, in input order.

    An empty result is valid. The input is never mutated.
    """
    items = list(records)
    if criteria is None:
        return items
    predicates = _build_predicates(criteria)
    if not predicates:
        return items
    kept = [record for record in items if all(check(record) for check in predicates)]
    log.debug(
        "Filtered records",
        extra={"input": len(items), "kept": len(kept), "criteria": len(predicates)},
    )
    return kept


def _sorted_missing_last(
    records: List[R], key: Callable[[R], Any], descending: bool
) -> List[R]:
    present = [(key(record), record) for record in records]
    with_key = [pair for pair in present if pair[0] is not None]
    without_key = [record for value, record in present if value is None]
    with_key.sort(key=lambda pair: pair[0], reverse=descending)
    return [record for _, record in with_key] + without_key


def sort_records(
    records: Iterable[R],
    option: Union[SortOption, str],
    date_field: str = "occurs_at",
    name_field: str = "title",
    amount_field: str = "amount",
) -> List[R]:
    """
    Stable sort matching the table sort menu; records lacking the sort value go last.
    """
    choice = SortOption(option)
    items = list(records)

    if choice in (SortOption.NEWEST, SortOption.OLDEST):
        return _sorted_missing_last(
            items,
            lambda record: normalize_timestamp(get_field(record, date_field)),
            descending=choice is SortOption.NEWEST,
        )
    if choice in (SortOption.NAME_ASC, SortOption.NAME_DESC):

        def name_key(record: Any) -> Optional[str]:
            value = get_field(record, name_field)
            return None if value is None else str(value).casefold()

        return _sorted_missing_last(items, name_key, descending=choice is SortOption.NAME_DESC)

    return _sorted_missing_last(
        items,
        lambda record: _as_number(get_field(record, amount_field)),
        descending=choice is SortOption.REVENUE_HIGH,
    )


__all__ = ["SortOption", "filter_records", "sort_records"]
