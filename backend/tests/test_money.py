from decimal import Decimal

import pytest

from quickinvoice.money import compute_totals, format_money, line_total, to_money
from quickinvoice.services.orders.inputs import LineItemInput


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("1.005", Decimal("1.01")),
        ("2.675", Decimal("2.68")),
        ("-0.005", Decimal("-0.01")),
        (0.1, Decimal("0.10")),
        (3, Decimal("3.00")),
    ],
)
def test_to_money_rounds_half_up(value: object, expected: Decimal) -> None:
    assert to_money(value) == expected  # type: ignore[arg-type]


def test_line_total_is_quantity_times_price() -> None:
    assert line_total(3, Decimal("12.50")) == Decimal("37.50")
    assert line_total(0, Decimal("12.50")) == Decimal("0.00")


def test_compute_totals_adds_delivery_fee() -> None:
    items = [
        LineItemInput(name="Kente cloth", quantity=2, unit_price=Decimal("150.00")),
        LineItemInput(name="Beads", quantity=3, unit_price=Decimal("7.25")),
    ]

    subtotal, total = compute_totals(items, Decimal("15.00"))

    assert subtotal == Decimal("321.75")
    assert total == Decimal("336.75")


def test_compute_totals_without_items() -> None:
    assert compute_totals([], Decimal("5")) == (Decimal("0.00"), Decimal("5.00"))


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (Decimal("50"), "GH₵50.00"),
        (Decimal("1234.5"), "GH₵1234.50"),
        (Decimal("-0.00"), "GH₵0.00"),
        (Decimal("-1"), "-GH₵1.00"),
    ],
)
def test_format_money(amount: Decimal, expected: str) -> None:
    assert format_money(amount, "GH₵") == expected
