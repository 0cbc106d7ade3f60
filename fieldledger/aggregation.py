"""
Financial roll-ups for technicians, contractors, job sources and categories.

`aggregate` makes a single pass over the records and produces grand totals
plus optional per-group totals:

    total_profit   = total_amount - total_earnings - total_expenses
    margin_percent = total_profit / total_amount * 100   (0 when total_amount is 0)

Expense and parts assumptions are parameters, never constants: pass
`expense_ratio=0.33` for "expenses are a third of revenue", or a callable
returning a ratio per record when categories carry different overheads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Optional, Union

from fieldledger.domain.models import AggregateResult, GroupTotals
from fieldledger.earnings import compute_earnings, require_finite, require_non_negative
from fieldledger.utils.fields import get_field
from fieldledger.utils.logging import get_logger

log = get_logger(__name__)

ExpenseRatio = Union[float, Callable[[Any], float]]
GroupBy = Union[str, Callable[[Any], Hashable]]


@dataclass
class _Running:
    """Mutable sums for one group while scanning; frozen into GroupTotals at the end."""

    count: int = 0
    amount: float = 0.0
    earnings: float = 0.0
    expenses: float = 0.0
    parts: float = 0.0

    def add(self, amount: float, earnings: float, expenses: float, parts: float) -> None:
        self.count += 1
        self.amount += amount
        self.earnings += earnings
        self.expenses += expenses
        self.parts += parts


def margin_percent(profit: float, amount: float) -> float:
    """Profit as a percentage of amount; 0.0 when there is no revenue."""
    if amount > 0:
        return profit / amount * 100.0
    return 0.0


def _group_key_fn(group_by: Optional[GroupBy]) -> Optional[Callable[[Any], Hashable]]:
    if group_by is None:
        return None
    if callable(group_by):
        return group_by
    field = group_by
    return lambda record: get_field(record, field)


def _totals(key: Hashable, running: _Running, extra_expenses: float = 0.0) -> GroupTotals:
    expenses = running.expenses + extra_expenses
    profit = running.amount - running.earnings - expenses
    return GroupTotals(
        key=key,
        record_count=running.count,
        total_amount=running.amount,
        total_earnings=running.earnings,
        total_expenses=expenses,
        total_profit=profit,
        margin_percent=margin_percent(profit, running.amount),
        parts_value=running.parts,
    )


def aggregate(
    records: Iterable[Any],
    group_by: Optional[GroupBy] = None,
    *,
    expense_ratio: ExpenseRatio = 0.0,
    fixed_expenses: float = 0.0,
    hours_per_record: Optional[float] = None,
    parts_ratio: float = 0.0,
) -> AggregateResult:
    """
    Grand and per-group revenue, earnings, expenses, profit and margin.

    Parameters
    ----------
    records : iterable
        FinancialRecord models, or any objects/mappings with the same fields.
    group_by : str | callable | None
        Field name or function giving each record's group key. Keys are kept
        as given (1 and "1" are different groups); groups appear in the order
        their key is first seen.
    expense_ratio : float | callable
        Share of each record's amount treated as expenses (0.33 = 33%), or a
        function returning that share per record.
    fixed_expenses : float
        Lump-sum expenses added to the grand total only; it is not spread
        across groups.
    hours_per_record : float | None
        Hours credited to each hourly record. Required if any record is hourly.
    parts_ratio : float
        Share of amount reported as parts and materials value. Informational,
        not deducted from profit.

    Raises
    ------
    InvalidNumericInput
        Any amount, rate, ratio or expense figure is NaN or infinite, or an
        amount or rate is negative. Mappings and plain objects get the same
        checks as FinancialRecord models.
    InvalidPaymentBasis
        A record carries an unknown payment basis.
    """
    static_ratio = None if callable(expense_ratio) else require_finite("expense_ratio", expense_ratio)
    fixed = require_finite("fixed_expenses", fixed_expenses)
    parts_share = require_finite("parts_ratio", parts_ratio)
    key_of = _group_key_fn(group_by)

    grand = _Running()
    groups: Dict[Hashable, _Running] = {}

    for record in records:
        record_id = get_field(record, "id")
        amount = require_non_negative("amount", get_field(record, "amount"), record_id)
        earnings = compute_earnings(record, hours_per_record)
        if static_ratio is None:
            ratio = require_finite("expense_ratio", expense_ratio(record), record_id)  # type: ignore[operator]
        else:
            ratio = static_ratio
        expenses = amount * ratio
        parts = amount * parts_share

        grand.add(amount, earnings, expenses, parts)
        if key_of is not None:
            groups.setdefault(key_of(record), _Running()).add(amount, earnings, expenses, parts)

    overall = _totals(None, grand, extra_expenses=fixed)
    result = AggregateResult(
        record_count=overall.record_count,
        total_amount=overall.total_amount,
        total_earnings=overall.total_earnings,
        total_expenses=overall.total_expenses,
        total_profit=overall.total_profit,
        margin_percent=overall.margin_percent,
        parts_value=overall.parts_value,
        fixed_expenses=fixed,
        groups=tuple(_totals(key, running) for key, running in groups.items()),
    )
    log.debug(
        "Aggregated records",
        extra={
            "records": result.record_count,
            "groups": len(result.groups),
            "total_amount": result.total_amount,
        },
    )
    return result


__all__ = ["aggregate", "margin_percent"]
