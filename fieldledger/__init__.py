"""
fieldledger - calendar bucketing and financial roll-ups for a field-service dashboard.

This package provides the pure, in-memory engine behind the dashboard's
scheduling calendar and finance screens:

- Day / ISO-week / month intervals, bucketing and period navigation
- Multi-criteria filtering and table sorting of jobs and payments
- Earnings per payment basis (percentage, flat per job, hourly)
- Revenue, earnings, expense, profit and margin roll-ups per group
- Estimate and invoice totals with discount and tax

No function keeps state between calls; time zone policy and business
assumptions (expense share, hours per record) are explicit parameters.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from fieldledger.aggregation import aggregate, margin_percent
from fieldledger.bucketing import (
    DatePreset,
    advance,
    bucket,
    daily_counts,
    interval_for,
    normalize_timestamp,
    preset_interval,
)
from fieldledger.config import Settings, get_settings
from fieldledger.dashboard import CalendarView, FinanceView, build_calendar_view, build_finance_view
from fieldledger.domain import (
    AggregateResult,
    DatedRecord,
    FilterCriteria,
    FinancialRecord,
    Granularity,
    GroupTotals,
    Interval,
    InvalidNumericInput,
    InvalidPaymentBasis,
    InvoiceTotals,
    LedgerError,
    LineItem,
    PaymentBasis,
)
from fieldledger.earnings import (
    PayPeriod,
    available_bases,
    compute_earnings,
    hours_per_month,
    normalize_to_monthly,
)
from fieldledger.filtering import SortOption, filter_records, sort_records
from fieldledger.invoicing import invoice_totals
from fieldledger.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
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
    # Errors
    "LedgerError",
    "InvalidNumericInput",
    "InvalidPaymentBasis",
    # Date bucketing
    "DatePreset",
    "advance",
    "bucket",
    "daily_counts",
    "interval_for",
    "normalize_timestamp",
    "preset_interval",
    # Earnings and invoices
    "PayPeriod",
    "available_bases",
    "compute_earnings",
    "hours_per_month",
    "normalize_to_monthly",
    "invoice_totals",
    # Filtering and aggregation
    "SortOption",
    "filter_records",
    "sort_records",
    "aggregate",
    "margin_percent",
    # Composed views
    "CalendarView",
    "FinanceView",
    "build_calendar_view",
    "build_finance_view",
    # Logging
    "configure_logging",
    "get_logger",
]
