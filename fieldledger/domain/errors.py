"""
Typed failures raised by the ledger engine.

All errors are raised synchronously and immediately; callers never receive a
partial result alongside an exception.
"""

from __future__ import annotations

from typing import Any, Optional


class LedgerError(Exception):
    """Base class for every error raised by fieldledger."""


class InvalidPaymentBasis(LedgerError, ValueError):
    """Earnings were requested for an unrecognized payment basis tag."""

    def __init__(self, basis: Any, record_id: Optional[str] = None) -> None:
        self.basis = basis
        self.record_id = record_id
        where = f" (record {record_id})" if record_id else ""
        super().__init__(f"Unknown payment basis {basis!r}{where}")


class InvalidNumericInput(LedgerError, ValueError):
    """An aggregation input was NaN, infinite or missing where a number is required."""

    def __init__(self, field: str, value: Any, record_id: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        self.record_id = record_id
        where = f" (record {record_id})" if record_id else ""
        super().__init__(f"Invalid numeric value for '{field}': {value!r}{where}")


__all__ = [
    "LedgerError",
    "InvalidPaymentBasis",
    "InvalidNumericInput",
]
