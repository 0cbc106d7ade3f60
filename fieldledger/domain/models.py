"""
Domain models for fieldledger.

Defines the records supplied by the dashboard (jobs, tasks, payments), the
interval type shared by the date bucketer and the filters, and the immutable
roll-up results produced by the aggregator.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, FrozenSet, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

Timestamp = Union[str, datetime, date, None]


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class PaymentBasis(str, Enum):
    PERCENTAGE = "percentage"
    FLAT_PER_JOB = "flatPerJob"
    HOURLY = "hourly"


class DatedRecord(BaseModel):
    """
    Any entity placed on the calendar (job, task, reminder).

    `occurs_at` is kept exactly as supplied; it is normalized by each
    operation, so malformed values exclude the record rather than failing here.
    """

    id: str = Field(..., description="Unique identifier.")
    occurs_at: Any = Field(None, description="ISO-8601 string, date or datetime.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "allow",
    }


class FinancialRecord(BaseModel):
    """
    Any entity contributing to a monetary roll-up (job, invoice, payout).
    """

    id: str = Field(..., description="Unique identifier.")
    amount: float = Field(..., description="Revenue or cost basis, currency-agnostic.")
    group_key: Optional[str] = Field(None, description="Technician, job source or category.")
    payment_basis: str = Field(
        PaymentBasis.PERCENTAGE.value,
        description="percentage | flatPerJob | hourly; validated when earnings are computed.",
    )
    rate: float = Field(0.0, description="Percent (0-100) for percentage, else currency amount.")
    status: Optional[str] = Field(None, description="Lifecycle tag such as paid or pending.")
    occurs_at: Any = Field(None, description="Optional date used by date filters.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "allow",
    }

    @field_validator("payment_basis", mode="before")
    @classmethod
    def _basis_value(cls, value: Any) -> Any:
        if isinstance(value, PaymentBasis):
            return value.value
        return value

    @field_validator("amount", "rate")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        # NaN compares False here on purpose; aggregation reports it as InvalidNumericInput.
        if value < 0:
            raise ValueError("must be >= 0")
        return value


class Interval(BaseModel):
    """
    Closed interval [start, end]; both bounds inclusive.
    """

    start: datetime
    end: datetime

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "Interval":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("start and end must both be naive or both be aware")
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self

    @property
    def tzinfo(self):
        return self.start.tzinfo

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    def days(self) -> Tuple[date, ...]:
        """Calendar days touched by the interval, in order."""
        first = self.start.date()
        count = (self.end.date() - first).days + 1
        return tuple(date.fromordinal(first.toordinal() + i) for i in range(count))


class FilterCriteria(BaseModel):
    """
    Independently optional filters, combined with logical AND.

    Empty collections and None mean "do not filter on this field".
    """

    search_text: Optional[str] = None
    search_fields: Tuple[str, ...] = ("id", "group_key", "status")
    include_groups: FrozenSet[str] = frozenset()
    include_statuses: FrozenSet[str] = frozenset()
    amount_range: Optional[Tuple[Optional[float], Optional[float]]] = None
    date_interval: Optional[Interval] = None
    date_field: str = "occurs_at"

    model_config = {"frozen": True}


class GroupTotals(BaseModel):
    """Roll-up figures for one group (or for the whole input)."""

    key: Any = Field(None, description="Group key as returned by group_by; None for the grand total.")
    record_count: int = 0
    total_amount: float = 0.0
    total_earnings: float = 0.0
    total_expenses: float = 0.0
    total_profit: float = 0.0
    margin_percent: float = 0.0
    parts_value: float = 0.0

    model_config = {"frozen": True}


class AggregateResult(BaseModel):
    """
    Output of `aggregate`: grand totals plus per-group totals in first-seen order.
    """

    record_count: int
    total_amount: float
    total_earnings: float
    total_expenses: float
    total_profit: float
    margin_percent: float
    parts_value: float = 0.0
    fixed_expenses: float = 0.0
    groups: Tuple[GroupTotals, ...] = ()

    model_config = {"frozen": True}

    @property
    def by_group(self) -> Mapping[Any, GroupTotals]:
        return MappingProxyType({group.key: group for group in self.groups})


class LineItem(BaseModel):
    """One line of an estimate, quote or invoice."""

    description: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0

    model_config = {"frozen": True}

    @property
    def amount(self) -> float:
        return self.quantity * self.unit_price


class InvoiceTotals(BaseModel):
    subtotal: float
    discount: float
    taxable: float
    tax: float
    total: float

    model_config = {"frozen": True}


__all__ = [
    "Timestamp",
    "LineItem",
    "InvoiceTotals",
    "Granularity",
    "PaymentBasis",
    "DatedRecord",
    "FinancialRecord",
    "Interval",
    "FilterCriteria",
    "GroupTotals",
    "AggregateResult",
]
