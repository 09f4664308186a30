"""Monetary amount helpers.

Prices are stored as ``DECIMAL(12, 2)``.  An amount with more places
would be silently rounded by the store and one with more than ten
integer digits cannot be stored at all, so both are rejected up front
and every total stays exact.
"""

from __future__ import annotations

from decimal import Decimal

MONEY_PLACES = 2
MONEY_MAX_DIGITS = 12
ZERO = Decimal("0.00")

# Smallest amount that no longer fits the column.
MONEY_LIMIT = Decimal(10) ** (MONEY_MAX_DIGITS - MONEY_PLACES)


def fits_money_field(value: Decimal) -> bool:
    """Return ``True`` when ``value`` is finite, below ``MONEY_LIMIT`` and has
    at most two decimal places."""
    if not value.is_finite():
        return False
    if abs(value) >= MONEY_LIMIT:
        return False
    exponent = value.normalize().as_tuple().exponent
    return exponent >= -MONEY_PLACES
