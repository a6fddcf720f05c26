"""Fixed-precision money helpers.

All amounts are ``Decimal`` quantized to cents with ROUND_HALF_UP, which in
``decimal`` terms rounds half away from zero (``-0.005`` -> ``-0.01``).
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyValue = Decimal | int | str


class PricedItem(Protocol):
    quantity: int
    unit_price: Decimal


def to_money(value: MoneyValue | float) -> Decimal:
    """Quantize a value to two decimal places.

    Floats go through ``str()`` first so ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, float):
        value = str(value)
    amount = value if isinstance(value, Decimal) else Decimal(value)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: int, unit_price: MoneyValue) -> Decimal:
    """Total for a single line: quantity x unit price, rounded to cents."""
    return to_money(Decimal(quantity) * Decimal(unit_price))


def compute_totals(items: Iterable[PricedItem], delivery_fee: MoneyValue) -> tuple[Decimal, Decimal]:
    """Return ``(subtotal, total)`` for the given items and delivery fee."""
    raw = sum((Decimal(item.quantity) * Decimal(item.unit_price) for item in items), Decimal(0))
    subtotal = to_money(raw)
    total = to_money(subtotal + Decimal(delivery_fee))
    return subtotal, total


def format_money(amount: MoneyValue, prefix: str) -> str:
    """Render an amount with two decimals and a currency prefix, e.g. ``GH₵12.50``."""
    value = to_money(amount)
    if value.is_zero():
        value = ZERO
    if value < 0:
        return f"-{prefix}{-value:.2f}"
    return f"{prefix}{value:.2f}"
