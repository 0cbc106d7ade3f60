from __future__ import annotations

import math

import pytest

from fieldledger.domain.errors import InvalidNumericInput
from fieldledger.domain.models import LineItem
from fieldledger.invoicing import invoice_totals

EXPECTED_SUBTOTAL = 550.0
EXPECTED_DISCOUNT = 55.0
EXPECTED_TAX = 39.6
EXPECTED_TOTAL = 534.6


def test_discount_applies_before_tax() -> None:
    items = [
        LineItem(description="Spring replacement", quantity=2, unit_price=150),
        {"description": "Labor", "quantity": 1, "unit_price": 200},
        50.0,
    ]

    totals = invoice_totals(items, tax_percent=8, discount_percent=10)

    assert totals.subtotal == pytest.approx(EXPECTED_SUBTOTAL)
    assert totals.discount == pytest.approx(EXPECTED_DISCOUNT)
    assert totals.taxable == pytest.approx(EXPECTED_SUBTOTAL - EXPECTED_DISCOUNT)
    assert totals.tax == pytest.approx(EXPECTED_TAX)
    assert totals.total == pytest.approx(EXPECTED_TOTAL)


def test_plain_totals_without_tax_or_discount() -> None:
    totals = invoice_totals([LineItem(quantity=3, unit_price=99.5)])

    assert totals.total == pytest.approx(298.5)
    assert totals.tax == 0.0
    assert totals.discount == 0.0


def test_empty_invoice_is_zero() -> None:
    assert invoice_totals([]).total == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [{"tax_percent": math.nan}, {"discount_percent": -5}, {"tax_percent": -1}],
)
def test_bad_percentages_are_rejected(kwargs) -> None:
    with pytest.raises(InvalidNumericInput):
        invoice_totals([100.0], **kwargs)


def test_non_finite_line_is_rejected() -> None:
    with pytest.raises(InvalidNumericInput):
        invoice_totals([LineItem(quantity=1, unit_price=math.inf)])
