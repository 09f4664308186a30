"""Order and OrderLine models.

Business rules implemented:
- ``OrderLine.unit_price`` is copied from the request that created the
  line; later product price changes never touch it.
- ``OrderLine.line_total`` is always ``quantity * unit_price``
  (recalculated on every save).
- ``Order.total_price`` is the sum of its line totals; the Service
  Layer recomputes it whenever the line set changes.
- ``Order.user`` uses PROTECT: users are never deleted with their orders,
  and the user model has no reverse accessor to its orders.
- Lines are owned by their order.  The order repository deletes them
  explicitly before the order; the ``CASCADE`` on the FK only guarantees
  that no line can outlive its order at the database level.
"""

from __future__ import annotations

from typing import Any

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.core.money import MONEY_MAX_DIGITS, MONEY_PLACES, ZERO
from modules.orders.constants import DEFAULT_ORDER_STATUS, STATUS_MAX_LENGTH
from modules.orders.pricing import compute_line_total


class Order(BaseModel):
    """Order aggregate root."""

    user = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="+",
    )
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=STATUS_MAX_LENGTH,
        default=DEFAULT_ORDER_STATUS,
    )
    total_price = models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_PLACES,
        default=ZERO,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-order_date", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-order_date"], name="orders_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="orders_total_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status}, ${self.total_price})"


class OrderLine(BaseModel):
    """Line item linking an Order to a Product.

    ``order_id`` is a back-reference used as a plain value; ownership
    runs from the order to its lines.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="lines",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="+",
    )
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
    )
    unit_price = models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_PLACES,
    )
    line_total = models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_PLACES,
        editable=False,
    )

    class Meta:
        db_table = "order_lines"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_lines_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="order_lines_unit_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.line_total = compute_line_total(self.unit_price, self.quantity)
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} (${self.line_total})"
