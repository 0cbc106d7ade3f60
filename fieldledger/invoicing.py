"""
Estimate, quote and invoice totals.

Subtotal is the sum of line amounts; the discount percentage comes off the
subtotal first and the tax percentage applies to what remains.
"""

from __future__ import annotations

from typing import Any, Iterable, Union

from fieldledger.domain.errors import InvalidNumericInput
from fieldledger.domain.models import InvoiceTotals, LineItem
from fieldledger.earnings import require_finite


def _line_amount(item: Union[LineItem, dict, Any]) -> float:
    if isinstance(item, dict):
        item = LineItem.model_validate(item)
    if isinstance(item, LineItem):
        quantity = require_finite("quantity", item.quantity)
        unit_price = require_finite("unit_price", item.unit_price)
        return quantity * unit_price
    return require_finite("amount", item)


def invoice_totals(
    items: Iterable[Union[LineItem, dict, float]],
    tax_percent: float = 0.0,
    discount_percent: float = 0.0,
) -> InvoiceTotals:
    """
    Totals for a list of line items (LineItem, dict, or bare amounts).

    Raises
    ------
    InvalidNumericInput
        Any quantity, price, amount or percentage is non-finite, or a
        percentage is negative.
    """
    tax_rate = require_finite("tax_percent", tax_percent)
    discount_rate = require_finite("discount_percent", discount_percent)
    if tax_rate < 0:
        raise InvalidNumericInput("tax_percent", tax_percent)
    if discount_rate < 0:
        raise InvalidNumericInput("discount_percent", discount_percent)

    subtotal = sum(_line_amount(item) for item in items)
    discount = subtotal * discount_rate / 100.0
    taxable = subtotal - discount
    tax = taxable * tax_rate / 100.0
    return InvoiceTotals(
        subtotal=subtotal,
        discount=discount,
        taxable=taxable,
        tax=tax,
        total=taxable + tax,
    )


__all__ = ["invoice_totals"]
