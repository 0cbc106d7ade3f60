from __future__ import annotations

import pytest

from fieldledger.bucketing import interval_for
from fieldledger.domain.models import FilterCriteria, FinancialRecord
from fieldledger.filtering import SortOption, filter_records, sort_records


def _ids(records) -> list:
    return [r.id if isinstance(r, FinancialRecord) else r["id"] for r in records]


def test_no_criteria_keeps_everything_in_order(jobs) -> None:
    assert _ids(filter_records(jobs)) == ["J1", "J2", "J3", "J4"]
    assert _ids(filter_records(jobs, FilterCriteria())) == ["J1", "J2", "J3", "J4"]


def test_result_is_a_new_list(jobs) -> None:
    original = list(jobs)
    result = filter_records(jobs, FilterCriteria(include_groups={"Alex"}))

    assert result is not jobs
    assert jobs == original


def test_search_is_case_insensitive_over_chosen_fields(jobs) -> None:
    assert _ids(filter_records(jobs, FilterCriteria(search_text="ALEX"))) == ["J1", "J3"]
    assert _ids(filter_records(jobs, FilterCriteria(search_text="tune", search_fields=("title",)))) == ["J2"]
    assert _ids(
        filter_records(jobs, FilterCriteria(search_text="google", search_fields=("title", "job_source")))
    ) == ["J1", "J3"]


def test_blank_search_is_ignored(jobs) -> None:
    assert len(filter_records(jobs, FilterCriteria(search_text="   "))) == len(jobs)


def test_search_skips_missing_fields(jobs) -> None:
    criteria = FilterCriteria(search_text="anything", search_fields=("no_such_field",))
    assert filter_records(jobs, criteria) == []


def test_group_inclusion_is_exact(jobs) -> None:
    assert _ids(filter_records(jobs, FilterCriteria(include_groups={"Alex", "Sam"}))) == ["J1", "J3", "J4"]
    assert filter_records(jobs, FilterCriteria(include_groups={"alex"})) == []


def test_status_inclusion_ignores_case(jobs) -> None:
    criteria = FilterCriteria(include_statuses={"pending", "PAID"})
    assert _ids(filter_records(jobs, criteria)) == ["J2", "J3"]


@pytest.mark.parametrize(
    ("amount_range", "expected"),
    [
        ((500.0, 1000.0), ["J1", "J2"]),
        ((None, 400.0), ["J4"]),
        ((1500.0, None), ["J3"]),
        ((None, None), ["J1", "J2", "J3", "J4"]),
    ],
)
def test_amount_range_is_inclusive(jobs, amount_range, expected) -> None:
    assert _ids(filter_records(jobs, FilterCriteria(amount_range=amount_range))) == expected


def test_date_interval_drops_unreadable_dates(jobs) -> None:
    march = interval_for("2024-03-01", "month")
    assert _ids(filter_records(jobs, FilterCriteria(date_interval=march))) == ["J1", "J2"]


def test_criteria_are_combined_with_and(jobs) -> None:
    criteria = FilterCriteria(
        include_groups={"Alex"},
        date_interval=interval_for("2024-03-01", "month"),
    )
    assert _ids(filter_records(jobs, criteria)) == ["J1"]


def test_adding_criteria_never_grows_the_result(jobs) -> None:
    steps = [
        FilterCriteria(),
        FilterCriteria(search_text="a"),
        FilterCriteria(search_text="a", include_statuses={"completed", "paid", "pending"}),
        FilterCriteria(
            search_text="a",
            include_statuses={"completed", "paid", "pending"},
            amount_range=(600.0, None),
        ),
        FilterCriteria(
            search_text="a",
            include_statuses={"completed", "paid", "pending"},
            amount_range=(600.0, None),
            date_interval=interval_for("2024-03-01", "month"),
        ),
    ]
    sizes = [len(filter_records(jobs, criteria)) for criteria in steps]

    assert sizes == sorted(sizes, reverse=True)
    assert sizes[-1] == 1


def test_filter_accepts_plain_mappings() -> None:
    rows = [
        {"id": "a", "amount": 10, "status": "paid"},
        {"id": "b", "amount": "n/a", "status": "paid"},
        {"id": "c", "amount": 99, "status": None},
    ]
    assert _ids(filter_records(rows, FilterCriteria(amount_range=(0, 50)))) == ["a"]
    assert _ids(filter_records(rows, FilterCriteria(include_statuses={"paid"}))) == ["a", "b"]


@pytest.mark.parametrize(
    ("option", "expected"),
    [
        (SortOption.NEWEST, ["J2", "J1", "J3", "J4"]),
        (SortOption.OLDEST, ["J3", "J1", "J2", "J4"]),
        (SortOption.NAME_ASC, ["J4", "J1", "J2", "J3"]),
        (SortOption.NAME_DESC, ["J3", "J2", "J1", "J4"]),
        (SortOption.REVENUE_HIGH, ["J3", "J1", "J2", "J4"]),
        (SortOption.REVENUE_LOW, ["J4", "J2", "J1", "J3"]),
    ],
)
def test_sort_options(jobs, option, expected) -> None:
    assert _ids(sort_records(jobs, option)) == expected


def test_sort_is_stable_and_puts_missing_values_last() -> None:
    rows = [
        {"id": "no-date"},
        {"id": "b", "occurs_at": "2024-03-01"},
        {"id": "a", "occurs_at": "2024-03-01"},
        {"id": "bad", "occurs_at": "soon"},
        {"id": "c", "occurs_at": "2024-03-02"},
    ]
    assert _ids(sort_records(rows, "newest")) == ["c", "b", "a", "no-date", "bad"]
    assert _ids(sort_records(rows, "oldest")) == ["b", "a", "c", "no-date", "bad"]


def test_unknown_sort_option_is_rejected(jobs) -> None:
    with pytest.raises(ValueError):
        sort_records(jobs, "random")
