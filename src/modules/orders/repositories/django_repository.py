"""Django ORM implementation of the Order repositories.

Satisfies ``IOrderRepository`` and ``IOrderLineRepository`` using
Django's QuerySet API.  All write operations are wrapped in
``transaction.atomic()`` so the Order aggregate (Order + OrderLines)
is persisted atomically.

Concurrency control on updates uses ``select_for_update()``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order, OrderLine
from modules.orders.repositories.interfaces import (
    IOrderLineRepository,
    IOrderRepository,
)

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create / replace (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, order: Order, lines: Sequence[OrderLine]) -> Order:
        order.save()
        for line in lines:
            line.order_id = order.id
            line.save()
        logger.info("order.persisted", order_id=str(order.id), line_count=len(lines))
        return order

    @transaction.atomic
    def replace_lines(self, order: Order, lines: Sequence[OrderLine]) -> List[OrderLine]:
        """Orphan removal: old lines are deleted, never re-parented."""
        removed, _ = OrderLine.objects.filter(order_id=order.id).delete()
        for line in lines:
            line.order_id = order.id
            line.save()
        logger.info(
            "order.lines_swapped",
            order_id=str(order.id),
            removed=removed,
            added=len(lines),
        )
        return list(lines)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the user FK and ``prefetch_related``
        for lines and their products.  Returns ``None`` for
        non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("user")
                .prefetch_related("lines__product")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Returns ``None`` for
        non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "PENDING"}
            {"user_id": "0190..."}
            {"order_date__range": (start, end)}
        """
        queryset = Order.objects.select_related("user").prefetch_related(
            "lines__product"
        )
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def line_ids(self, order_id: str) -> List[str]:
        return [
            str(pk)
            for pk in OrderLine.objects.filter(order_id=order_id).values_list(
                "id", flat=True
            )
        ]

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order row; lines are untouched."""
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete an order and every line it owns.

        Lines are removed explicitly by id before the order row.
        """
        order = self.get_for_update(id)
        if not order:
            return False
        line_ids = self.line_ids(str(order.id))
        OrderLine.objects.filter(id__in=line_ids).delete()
        order.delete()
        logger.info("order.deleted", order_id=str(id), line_count=len(line_ids))
        return True


class OrderLineDjangoRepository(IOrderLineRepository):
    """Concrete OrderLine repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[OrderLine]:
        try:
            return OrderLine.objects.select_related("product").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderLine]:
        """List lines with optional look-ups, e.g. ``{"order_id": ...}``."""
        queryset = OrderLine.objects.select_related("product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def line_totals(self, order_id: str) -> List[Decimal]:
        return list(
            OrderLine.objects.filter(order_id=order_id).values_list(
                "line_total", flat=True
            )
        )

    @transaction.atomic
    def save(self, entity: OrderLine) -> OrderLine:
        entity.save()
        logger.info(
            "order_line.saved",
            line_id=str(entity.id),
            order_id=str(entity.order_id),
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        line = self.get_by_id(id)
        if not line:
            return False
        line.delete()
        logger.info("order_line.deleted", line_id=str(id), order_id=str(line.order_id))
        return True
