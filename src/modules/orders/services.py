"""Order service layer (Use Cases).

Orchestrates the core business logic of the Order aggregate: building
an order from line requests, reconciling partial edits, deleting an
order with its lines, and single-line maintenance.  All write
operations are atomic; the service defines the unit-of-work boundary.

Business rules enforced:
- A caller-supplied ``order_date`` may not lie in the future.
- Every line references an existing product and carries a valid
  quantity and unit price.
- ``line_total`` is ``unit_price * quantity`` and ``total_price`` is the
  exact sum of line totals; totals sent by callers are never stored.
- Replacing an order's lines deletes the old ones (orphan removal).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

import structlog
from django.db import transaction
from django.utils import timezone

from modules.core.money import MONEY_LIMIT, fits_money_field
from modules.orders.constants import DEFAULT_ORDER_STATUS
from modules.orders.exceptions import (
    InvalidOrder,
    InvalidOrderLine,
    OrderLineNotFound,
    OrderNotFound,
)
from modules.orders.models import Order, OrderLine
from modules.orders.pricing import compute_line_total, compute_order_total
from modules.products.exceptions import ProductNotFound
from modules.users.exceptions import UserNotFound

if TYPE_CHECKING:
    from modules.orders.dtos import (
        CreateOrderDTO,
        CreateOrderLineDTO,
        OrderLineRequestDTO,
        UpdateOrderDTO,
        UpdateOrderLineDTO,
    )
    from modules.orders.repositories.interfaces import (
        IOrderLineRepository,
        IOrderRepository,
    )
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository
    from modules.users.models import User
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


def _validate_order_date(value: datetime) -> datetime:
    """Return ``value`` as an aware datetime, rejecting future dates."""
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    if value > timezone.now():
        raise InvalidOrder(f"Order date {value.isoformat()} cannot be in the future.")
    return value


def _order_total(line_totals: Iterable[Decimal]) -> Decimal:
    """Sum the line totals, rejecting an order total the store cannot hold."""
    total = compute_order_total(line_totals)
    if not fits_money_field(total):
        raise InvalidOrder(f"Order total {total} must be below {MONEY_LIMIT}.")
    return total


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        user_repository: IUserRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._user_repo = user_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: Optional[CreateOrderDTO]) -> Order:
        """Build and persist a new order from its line requests.

        Steps:
        1. Validate the optional order date.
        2. Resolve the user.
        3. For each line request: validate, resolve the product, and
           compute the line total from the caller's unit price.
        4. Set the order total and persist order + lines atomically.

        Raises:
            InvalidOrder: ``dto`` is missing or the date is in the future.
            UserNotFound: the user does not exist.
            InvalidOrderLine: a line has a bad quantity or unit price.
            ProductNotFound: a line references a missing product.
        """
        if dto is None:
            raise InvalidOrder("Order details are required.")

        log = logger.bind(user_id=str(dto.user_id), line_count=len(dto.lines))
        log.info("order.creation_started")

        order_date = (
            _validate_order_date(dto.order_date) if dto.order_date else timezone.now()
        )
        user = self._resolve_user(dto.user_id)

        order = Order(
            user=user,
            order_date=order_date,
            status=dto.status or DEFAULT_ORDER_STATUS,
        )
        lines = self._build_lines(order, dto.lines)
        order.total_price = _order_total(line.line_total for line in lines)

        order = self._order_repo.create(order, lines)
        log.info(
            "order.created",
            order_id=str(order.id),
            total_price=str(order.total_price),
        )

        # Re-fetch with prefetch for output
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_order(self, order_id: Any, dto: Optional[UpdateOrderDTO]) -> Order:
        """Merge the supplied fields into an existing order.

        The order row is locked for the whole reconciliation.  When
        ``lines`` is supplied the previous lines are deleted, the new
        ones are built from scratch and the total is recomputed from
        them alone; otherwise lines and total are left as they are.

        Raises:
            InvalidOrder: ``dto`` is missing, the date is in the future
                or the proposed total is negative.
            OrderNotFound: the order does not exist.
            UserNotFound: the proposed user does not exist.
            InvalidOrderLine / ProductNotFound: as for ``create_order``.
        """
        if dto is None:
            raise InvalidOrder("Order details are required.")

        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        changes = dto.changes()
        log = logger.bind(order_id=str(order.id), fields=sorted(changes))

        order_date = changes.get("order_date")
        if order_date is not None:
            order_date = _validate_order_date(order_date)
        proposed_total = changes.get("total_price")
        if proposed_total is not None and proposed_total < 0:
            raise InvalidOrder(
                f"Total price cannot be negative, got {proposed_total}."
            )

        if order_date is not None:
            order.order_date = order_date
        if "status" in changes:
            order.status = changes["status"]
        if "user_id" in changes:
            order.user = self._resolve_user(changes["user_id"])

        if "lines" in changes:
            lines = self._build_lines(order, changes["lines"])
            order.total_price = _order_total(line.line_total for line in lines)
            self._order_repo.replace_lines(order, lines)
            log.info("order.lines_replaced", line_count=len(lines))

        self._order_repo.save(order)
        log.info("order.updated", total_price=str(order.total_price))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: Any) -> None:
        """Delete an order and all of its lines.

        Raises:
            OrderNotFound: the order does not exist.
        """
        if not self._order_repo.delete(str(order_id)):
            raise OrderNotFound(f"Order {order_id} not found.")
        logger.info("order.removed", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any) -> Order:
        """Retrieve a single order with its lines.

        Raises:
            OrderNotFound: the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _resolve_user(self, user_id: Any) -> User:
        user = self._user_repo.get_by_id(str(user_id))
        if not user:
            raise UserNotFound(f"User {user_id} not found.")
        return user

    def _build_lines(
        self,
        order: Order,
        requests: Sequence[OrderLineRequestDTO],
    ) -> List[OrderLine]:
        """Turn line requests into unsaved ``OrderLine`` instances.

        Products are fetched in one query; the first request (in payload
        order) that fails validation or references a missing product
        aborts the whole build.
        """
        products = self._product_repo.get_many(str(r.product_id) for r in requests)
        lines = []
        for request in requests:
            line_total = compute_line_total(request.unit_price, request.quantity)
            product = products.get(str(request.product_id))
            if product is None:
                raise ProductNotFound(f"Product {request.product_id} not found.")
            lines.append(
                OrderLine(
                    order_id=order.id,
                    product=product,
                    quantity=request.quantity,
                    unit_price=request.unit_price,
                    line_total=line_total,
                )
            )
        return lines


class OrderLineService:
    """Application service for maintaining individual order lines.

    Every mutation recomputes the owning order's total while holding
    a lock on the order row.
    """

    def __init__(
        self,
        order_line_repository: IOrderLineRepository,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._line_repo = order_line_repository
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_order_line(self, dto: Optional[CreateOrderLineDTO]) -> OrderLine:
        """Append a line to an existing order.

        Raises:
            InvalidOrderLine: ``dto`` is missing or the line is invalid.
            InvalidOrder: the new order total is too large to store.
            OrderNotFound: the order does not exist.
            ProductNotFound: the product does not exist.
        """
        if dto is None:
            raise InvalidOrderLine("Order line details are required.")

        order = self._lock_order(dto.order_id)
        line_total = compute_line_total(dto.unit_price, dto.quantity)
        product = self._resolve_product(dto.product_id)

        line = OrderLine(
            order_id=order.id,
            product=product,
            quantity=dto.quantity,
            unit_price=dto.unit_price,
            line_total=line_total,
        )
        line = self._line_repo.save(line)
        self._refresh_total(order)
        logger.info("order_line.created", line_id=str(line.id), order_id=str(order.id))
        return line

    @transaction.atomic
    def update_order_line(
        self, line_id: Any, dto: Optional[UpdateOrderLineDTO]
    ) -> OrderLine:
        """Apply a patch to a line and recompute both totals.

        Raises:
            InvalidOrderLine: ``dto`` is missing or the result is invalid.
            OrderLineNotFound: the line does not exist.
            ProductNotFound: the proposed product does not exist.
        """
        if dto is None:
            raise InvalidOrderLine("Order line details are required.")

        line = self._get_line(line_id)
        order = self._lock_order(line.order_id)
        changes = dto.changes()

        quantity = changes.get("quantity", line.quantity)
        unit_price = changes.get("unit_price", line.unit_price)
        line_total = compute_line_total(unit_price, quantity)
        if "product_id" in changes:
            line.product = self._resolve_product(changes["product_id"])

        line.quantity = quantity
        line.unit_price = unit_price
        line.line_total = line_total
        line = self._line_repo.save(line)
        self._refresh_total(order)
        logger.info("order_line.updated", line_id=str(line.id), fields=sorted(changes))
        return line

    @transaction.atomic
    def delete_order_line(self, line_id: Any) -> None:
        """Remove a line and recompute its order's total.

        Raises:
            OrderLineNotFound: the line does not exist.
        """
        line = self._get_line(line_id)
        order = self._lock_order(line.order_id)
        self._line_repo.delete(str(line.id))
        self._refresh_total(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order_line(self, line_id: Any) -> OrderLine:
        return self._get_line(line_id)

    def list_order_lines(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[OrderLine]:
        return self._line_repo.list(filters)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_line(self, line_id: Any) -> OrderLine:
        line = self._line_repo.get_by_id(str(line_id))
        if not line:
            raise OrderLineNotFound(f"Order line {line_id} not found.")
        return line

    def _lock_order(self, order_id: Any) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _resolve_product(self, product_id: Any) -> Product:
        product = self._product_repo.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product

    def _refresh_total(self, order: Order) -> None:
        order.total_price = _order_total(self._line_repo.line_totals(str(order.id)))
        self._order_repo.save(order)
