"""
Earnings rules: how much a technician, contractor or job source is owed for a record.

Each payment basis is a small rule object implementing the `EarningsRule`
protocol; `compute_earnings` resolves the rule from the record's
`payment_basis` tag through a registry, the same way new bases would be added.

Hours for hourly pay are always passed in explicitly. Payroll screens that
think in weeks or months use `hours_per_month` / `normalize_to_monthly` to
derive the figure instead of hiding a constant here.
"""

from __future__ import annotations

import abc
import math
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Union, runtime_checkable

from fieldledger.domain.errors import InvalidNumericInput, InvalidPaymentBasis
from fieldledger.domain.models import PaymentBasis
from fieldledger.utils.fields import get_field

DEFAULT_WEEKS_PER_MONTH = 4.33
DEFAULT_HOURS_PER_WEEK = 40.0


def require_finite(field: str, value: Any, record_id: Optional[str] = None) -> float:
    """Coerce `value` to float, raising InvalidNumericInput for None, NaN or infinity."""
    if isinstance(value, bool):
        raise InvalidNumericInput(field, value, record_id)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidNumericInput(field, value, record_id) from None
    if not math.isfinite(number):
        raise InvalidNumericInput(field, value, record_id)
    return number


def require_non_negative(field: str, value: Any, record_id: Optional[str] = None) -> float:
    """Like require_finite, but negative numbers are rejected too."""
    number = require_finite(field, value, record_id)
    if number < 0:
        raise InvalidNumericInput(field, value, record_id)
    return number


@runtime_checkable
class EarningsRule(Protocol):
    """
    Common interface for payment-basis rules.

    Attributes
    ----------
    basis : PaymentBasis
        The tag this rule handles.
    description : str
        A human-friendly summary of the formula.
    """

    basis: PaymentBasis
    description: str

    def compute(self, amount: float, rate: float, hours_per_record: Optional[float]) -> float:
        """Earnings for a single record."""
        ...


class AbstractEarningsRule(abc.ABC):
    """
    Optional ABC helper for class-based rules.

    Subclasses set `basis` and `description` and implement `compute`.
    """

    basis: PaymentBasis
    description: str

    @abc.abstractmethod
    def compute(
        self, amount: float, rate: float, hours_per_record: Optional[float]
    ) -> float:  # pragma: no cover - interface only
        raise NotImplementedError


class PercentageRule(AbstractEarningsRule):
    basis = PaymentBasis.PERCENTAGE
    description = "rate percent of the record amount"

    def compute(self, amount: float, rate: float, hours_per_record: Optional[float]) -> float:
        return amount * (rate / 100.0)


class FlatPerJobRule(AbstractEarningsRule):
    basis = PaymentBasis.FLAT_PER_JOB
    description = "rate paid once per record, independent of amount"

    def compute(self, amount: float, rate: float, hours_per_record: Optional[float]) -> float:
        return rate


class HourlyRule(AbstractEarningsRule):
    basis = PaymentBasis.HOURLY
    description = "rate times the hours credited to each record"

    def compute(self, amount: float, rate: float, hours_per_record: Optional[float]) -> float:
        hours = require_finite("hours_per_record", hours_per_record)
        return rate * hours


def _earnings_rules() -> Dict[str, Callable[[], EarningsRule]]:
    """Registry of available payment bases."""
    return {
        PaymentBasis.PERCENTAGE.value: lambda: PercentageRule(),
        PaymentBasis.FLAT_PER_JOB.value: lambda: FlatPerJobRule(),
        PaymentBasis.HOURLY.value: lambda: HourlyRule(),
    }


def available_bases() -> List[str]:
    """List registered payment basis tags."""
    return sorted(_earnings_rules().keys())


def resolve_rule(basis: Any, record_id: Optional[str] = None) -> EarningsRule:
    """Look up the rule for `basis`; unknown tags raise InvalidPaymentBasis."""
    key = basis.value if isinstance(basis, PaymentBasis) else basis
    factories = _earnings_rules()
    if not isinstance(key, str) or key not in factories:
        raise InvalidPaymentBasis(basis, record_id)
    return factories[key]()


def compute_earnings(record: Any, hours_per_record: Optional[float] = None) -> float:
    """
    Earnings derived from a record's amount, rate and payment basis.

    - percentage: amount * rate / 100
    - flatPerJob: rate
    - hourly: rate * hours_per_record

    Raises
    ------
    InvalidPaymentBasis
        The record's `payment_basis` is not a registered tag.
    InvalidNumericInput
        amount or rate is negative or not finite, or an hourly record has no usable
        `hours_per_record`.
    """
    record_id = get_field(record, "id")
    rule = resolve_rule(get_field(record, "payment_basis"), record_id)
    amount = require_non_negative("amount", get_field(record, "amount"), record_id)
    rate = require_non_negative("rate", get_field(record, "rate", 0.0), record_id)
    try:
        return rule.compute(amount, rate, hours_per_record)
    except InvalidNumericInput as exc:
        if exc.record_id is None and record_id is not None:
            raise InvalidNumericInput(exc.field, exc.value, record_id) from None
        raise


class PayPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


def normalize_to_monthly(
    amount: float,
    period: Union[PayPeriod, str],
    weeks_per_month: float = DEFAULT_WEEKS_PER_MONTH,
) -> float:
    """Convert a weekly, monthly or yearly pay figure into a monthly one."""
    value = require_finite("amount", amount)
    unit = PayPeriod(period)
    if unit is PayPeriod.WEEKLY:
        return value * require_finite("weeks_per_month", weeks_per_month)
    if unit is PayPeriod.YEARLY:
        return value / 12.0
    return value


def hours_per_month(
    hours_per_week: float = DEFAULT_HOURS_PER_WEEK,
    weeks_per_month: float = DEFAULT_WEEKS_PER_MONTH,
) -> float:
    """Working hours in an average month, e.g. 40 * 4.33 = 173.2."""
    return require_finite("hours_per_week", hours_per_week) * require_finite(
        "weeks_per_month", weeks_per_month
    )


__all__ = [
    "EarningsRule",
    "AbstractEarningsRule",
    "PercentageRule",
    "FlatPerJobRule",
    "HourlyRule",
    "available_bases",
    "resolve_rule",
    "compute_earnings",
    "require_finite",
    "require_non_negative",
    "PayPeriod",
    "normalize_to_monthly",
    "hours_per_month",
]
