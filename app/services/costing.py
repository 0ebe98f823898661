"""Recipe cost and order total arithmetic (Decimal, rounded half-up to cents)."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
HUNDRED = Decimal(100)
# Largest value a Numeric(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Round to two decimal places, half-up."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_cost(quantity: Decimal | int, unit_price: Decimal) -> Decimal:
    return to_money(Decimal(str(quantity)) * Decimal(str(unit_price)))


def recipe_cost(lines: Iterable[tuple[Decimal | int, Decimal]]) -> Decimal:
    """Sum of quantity * ingredient price over (quantity, price) pairs."""
    return to_money(sum((line_cost(q, p) for q, p in lines), Decimal(0)))


def order_subtotal(items: Iterable[tuple[int, Decimal]]) -> Decimal:
    """Sum of quantity * unit_price over (quantity, unit_price) pairs."""
    return recipe_cost(items)


def order_total(subtotal: Decimal, profit_margin: Decimal | int) -> Decimal:
    """Subtotal plus profit_margin percent."""
    margin = Decimal(str(profit_margin))
    if margin < 0:
        raise ValueError("profit_margin must not be negative")
    return to_money(Decimal(str(subtotal)) * (1 + margin / HUNDRED))
