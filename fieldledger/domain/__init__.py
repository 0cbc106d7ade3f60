"""
Domain package for fieldledger.

Exports the record, interval and result models plus the typed errors shared
by the bucketer, filters and aggregator. Keep this package focused on data
definitions and validation concerns.
"""

from fieldledger.domain.errors import InvalidNumericInput, InvalidPaymentBasis, LedgerError
from fieldledger.domain.models import (
    AggregateResult,
    DatedRecord,
    FilterCriteria,
    FinancialRecord,
    Granularity,
    GroupTotals,
    Interval,
    InvoiceTotals,
    LineItem,
    PaymentBasis,
    Timestamp,
)

__all__ = [
    "AggregateResult",
    "DatedRecord",
    "FilterCriteria",
    "FinancialRecord",
    "Granularity",
    "GroupTotals",
    "Interval",
    "InvoiceTotals",
    "LineItem",
    "PaymentBasis",
    "Timestamp",
    "LedgerError",
    "InvalidPaymentBasis",
    "InvalidNumericInput",
]
