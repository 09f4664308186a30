"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Missing products and users are reported
with ``ProductNotFound`` / ``UserNotFound`` from their own modules.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidArgument, NotFound


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class OrderLineNotFound(NotFound):
    """The requested order line does not exist."""


class InvalidOrder(InvalidArgument):
    """Order-level input is missing or out of range (future date, negative total)."""


class InvalidOrderLine(InvalidArgument):
    """A line has a missing/negative unit price or a non-positive quantity."""
