"""Totals arithmetic for the order aggregate.

All amounts are ``Decimal``; nothing is rounded.  Unit prices are
limited to two decimal places (the precision the store keeps), so a
line total is exact and an order total is an exact sum.  Every amount,
derived ones included, must fit the ``DECIMAL(12, 2)`` columns.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from modules.core.money import MONEY_LIMIT, ZERO, fits_money_field
from modules.orders.exceptions import InvalidOrderLine

# Upper bound of ``PositiveIntegerField`` on every supported backend.
MAX_QUANTITY = 2147483647


def compute_line_total(unit_price: Optional[Decimal], quantity: Optional[int]) -> Decimal:
    """Return ``unit_price * quantity`` after validating both operands.

    Raises:
        InvalidOrderLine: missing or negative price, a price with more
            than two decimal places, a quantity outside ``1..MAX_QUANTITY``,
            or a product too large to store.
    """
    if unit_price is None:
        raise InvalidOrderLine("Order line must have a unit price.")
    if not isinstance(unit_price, Decimal):
        raise InvalidOrderLine(
            f"Unit price must be a Decimal, got {type(unit_price).__name__}."
        )
    if not fits_money_field(unit_price):
        raise InvalidOrderLine(
            f"Unit price {unit_price} must be below {MONEY_LIMIT} "
            "with at most two decimal places."
        )
    if unit_price < 0:
        raise InvalidOrderLine(f"Unit price cannot be negative, got {unit_price}.")
    if quantity is None or isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidOrderLine(f"Quantity must be an integer, got {quantity!r}.")
    if quantity < 1:
        raise InvalidOrderLine(f"Quantity must be at least 1, got {quantity}.")
    if quantity > MAX_QUANTITY:
        raise InvalidOrderLine(f"Quantity must be at most {MAX_QUANTITY}, got {quantity}.")

    line_total = unit_price * quantity
    if not fits_money_field(line_total):
        raise InvalidOrderLine(
            f"Line total {unit_price} x {quantity} must be below {MONEY_LIMIT}."
        )
    return line_total


def compute_order_total(line_totals: Iterable[Decimal]) -> Decimal:
    """Exact sum of the line totals; ``0.00`` for an order without lines."""
    return sum(line_totals, ZERO)
