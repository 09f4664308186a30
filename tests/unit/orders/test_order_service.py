"""Unit tests for OrderService.

Covers:
- Order creation: totals, caller-supplied prices, defaults.
- Rejection of missing users/products, bad lines and future dates,
  with nothing persisted on failure.
- Partial updates: untouched fields stay as they were.
- Line replacement: old lines are removed, total recomputed.
- Deletion removes every owned line.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.utils import timezone

from modules.orders.dtos import CreateOrderDTO, OrderLineRequestDTO, UpdateOrderDTO
from modules.orders.exceptions import InvalidOrder, InvalidOrderLine, OrderNotFound
from modules.orders.models import Order, OrderLine
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.exceptions import ProductNotFound
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.exceptions import UserNotFound
from modules.users.repositories.django_repository import UserDjangoRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        user_repository=UserDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _line(product, quantity, unit_price) -> OrderLineRequestDTO:
    return OrderLineRequestDTO(
        product_id=product.id,
        quantity=quantity,
        unit_price=Decimal(unit_price),
    )


@pytest.fixture()
def order(service, user, product_a, product_b):
    """An order with three lines totalling 50.00."""
    return service.create_order(
        CreateOrderDTO(
            user_id=user.id,
            lines=[
                _line(product_a, 2, "10.00"),
                _line(product_b, 3, "5.00"),
                _line(product_b, 1, "15.00"),
            ],
        )
    )


# ===========================================================================
# create_order
# ===========================================================================


class TestCreateOrder:
    def test_totals(self, service, user, product_a, product_b):
        order = service.create_order(
            CreateOrderDTO(
                user_id=user.id,
                lines=[_line(product_a, 4, "10.00"), _line(product_b, 1, "29.99")],
            )
        )

        line_totals = sorted(line.line_total for line in order.lines.all())
        assert line_totals == [Decimal("29.99"), Decimal("40.00")]
        assert order.total_price == Decimal("69.99")

    def test_line_total_is_exact(self, service, user, product_a):
        order = service.create_order(
            CreateOrderDTO(user_id=user.id, lines=[_line(product_a, 3, "19.99")])
        )
        line = order.lines.get()
        assert line.line_total == Decimal("59.97")
        assert order.total_price == Decimal("59.97")

    def test_uses_caller_unit_price(self, service, user, product_a):
        order = service.create_order(
            CreateOrderDTO(user_id=user.id, lines=[_line(product_a, 1, "7.50")])
        )
        line = order.lines.get()
        assert line.unit_price == Decimal("7.50")
        assert product_a.price == Decimal("10.00")

    def test_defaults(self, service, user):
        before = timezone.now()
        order = service.create_order(CreateOrderDTO(user_id=user.id))

        assert order.status == "PENDING"
        assert order.total_price == Decimal("0.00")
        assert order.order_date >= before
        assert order.lines.count() == 0

    def test_lines_reference_the_order(self, service, user, product_a):
        order = service.create_order(
            CreateOrderDTO(user_id=user.id, lines=[_line(product_a, 1, "10.00")])
        )
        assert OrderLine.objects.get().order_id == order.id

    def test_past_order_date_kept(self, service, user):
        when = timezone.now() - timedelta(days=3)
        order = service.create_order(CreateOrderDTO(user_id=user.id, order_date=when))
        assert order.order_date == when

    def test_none_dto_rejected(self, service):
        with pytest.raises(InvalidOrder):
            service.create_order(None)

    def test_future_date_rejected(self, service, user):
        dto = CreateOrderDTO(
            user_id=user.id, order_date=timezone.now() + timedelta(days=1)
        )
        with pytest.raises(InvalidOrder, match="future"):
            service.create_order(dto)
        assert Order.objects.count() == 0

    def test_unknown_user_rejected(self, service, product_a):
        missing = uuid4()
        dto = CreateOrderDTO(user_id=missing, lines=[_line(product_a, 1, "10.00")])
        with pytest.raises(UserNotFound, match=str(missing)):
            service.create_order(dto)
        assert Order.objects.count() == 0

    def test_missing_product_persists_nothing(self, service, user, product_a):
        missing = uuid4()
        dto = CreateOrderDTO(
            user_id=user.id,
            lines=[
                _line(product_a, 1, "10.00"),
                OrderLineRequestDTO(product_id=missing, quantity=1, unit_price=Decimal("1.00")),
            ],
        )
        with pytest.raises(ProductNotFound, match=str(missing)):
            service.create_order(dto)
        assert Order.objects.count() == 0
        assert OrderLine.objects.count() == 0

    def test_order_total_beyond_column_rejected(self, service, user, product_a, product_b):
        dto = CreateOrderDTO(
            user_id=user.id,
            lines=[
                _line(product_a, 1, "6000000000.00"),
                _line(product_b, 1, "6000000000.00"),
            ],
        )
        with pytest.raises(InvalidOrder, match="Order total"):
            service.create_order(dto)
        assert Order.objects.count() == 0
        assert OrderLine.objects.count() == 0

    @pytest.mark.parametrize(
        ("quantity", "unit_price"),
        [(0, Decimal("1.00")), (1, None), (1, Decimal("-1.00"))],
    )
    def test_invalid_line_rejected(self, service, user, product_a, quantity, unit_price):
        dto = CreateOrderDTO(
            user_id=user.id,
            lines=[
                OrderLineRequestDTO(
                    product_id=product_a.id, quantity=quantity, unit_price=unit_price
                )
            ],
        )
        with pytest.raises(InvalidOrderLine):
            service.create_order(dto)
        assert Order.objects.count() == 0

    def test_reports_first_missing_product_in_request_order(self, user):
        products = MagicMock()
        products.get_many.return_value = {}
        users = MagicMock()
        users.get_by_id.return_value = user
        service = OrderService(
            order_repository=MagicMock(),
            user_repository=users,
            product_repository=products,
        )
        first, second = uuid4(), uuid4()
        dto = CreateOrderDTO(
            user_id=user.id,
            lines=[
                OrderLineRequestDTO(product_id=first, quantity=1, unit_price=Decimal("1.00")),
                OrderLineRequestDTO(product_id=second, quantity=1, unit_price=Decimal("1.00")),
            ],
        )
        with pytest.raises(ProductNotFound, match=str(first)):
            service.create_order(dto)


# ===========================================================================
# update_order
# ===========================================================================


class TestUpdateOrder:
    def test_status_only_preserves_other_fields(self, service, order):
        original_date = order.order_date
        original_user = order.user_id

        updated = service.update_order(order.id, UpdateOrderDTO(status="SHIPPED"))

        assert updated.status == "SHIPPED"
        assert updated.order_date == original_date
        assert updated.total_price == Decimal("50.00")
        assert updated.user_id == original_user
        assert updated.lines.count() == 3

    def test_replaces_lines(self, service, order, product_a):
        old_ids = set(order.lines.values_list("id", flat=True))

        updated = service.update_order(
            order.id,
            UpdateOrderDTO(
                lines=[_line(product_a, 1, "1.00"), _line(product_a, 2, "2.50")]
            ),
        )

        assert updated.lines.count() == 2
        assert updated.total_price == Decimal("6.00")
        assert not OrderLine.objects.filter(id__in=old_ids).exists()

    def test_replace_with_empty_lines(self, service, order):
        updated = service.update_order(order.id, UpdateOrderDTO(lines=[]))
        assert updated.lines.count() == 0
        assert updated.total_price == Decimal("0.00")

    def test_replacement_total_beyond_column_rejected(self, service, order, product_a):
        dto = UpdateOrderDTO(
            lines=[_line(product_a, 2, "9999999999.99")],
        )
        with pytest.raises(InvalidOrderLine, match="Line total"):
            service.update_order(order.id, dto)
        order.refresh_from_db()
        assert order.total_price == Decimal("50.00")

    def test_supplied_total_is_ignored(self, service, order):
        updated = service.update_order(order.id, UpdateOrderDTO(total_price=Decimal("999.00")))
        assert updated.total_price == Decimal("50.00")

    def test_supplied_total_superseded_by_new_lines(self, service, order, product_a):
        updated = service.update_order(
            order.id,
            UpdateOrderDTO(total_price=Decimal("1.00"), lines=[_line(product_a, 3, "10.00")]),
        )
        assert updated.total_price == Decimal("30.00")

    def test_negative_total_rejected(self, service, order):
        with pytest.raises(InvalidOrder, match="negative"):
            service.update_order(order.id, UpdateOrderDTO(total_price=Decimal("-0.01")))

    def test_future_date_rejected(self, service, order):
        dto = UpdateOrderDTO(order_date=timezone.now() + timedelta(minutes=5))
        with pytest.raises(InvalidOrder, match="future"):
            service.update_order(order.id, dto)
        order.refresh_from_db()
        assert order.order_date < timezone.now()

    def test_naive_date_is_made_aware(self, service, order):
        naive = (timezone.now() - timedelta(days=1)).replace(tzinfo=None)
        updated = service.update_order(order.id, UpdateOrderDTO(order_date=naive))
        assert timezone.is_aware(updated.order_date)

    def test_change_user(self, service, order, other_user):
        updated = service.update_order(order.id, UpdateOrderDTO(user_id=other_user.id))
        assert updated.user_id == other_user.id

    def test_unknown_user_rejected(self, service, order):
        with pytest.raises(UserNotFound):
            service.update_order(order.id, UpdateOrderDTO(user_id=uuid4()))

    def test_missing_product_leaves_lines_intact(self, service, order):
        bad = OrderLineRequestDTO(product_id=uuid4(), quantity=1, unit_price=Decimal("1.00"))
        with pytest.raises(ProductNotFound):
            service.update_order(order.id, UpdateOrderDTO(status="X", lines=[bad]))

        order.refresh_from_db()
        assert order.status == "PENDING"
        assert order.total_price == Decimal("50.00")
        assert OrderLine.objects.filter(order_id=order.id).count() == 3

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.update_order(uuid4(), UpdateOrderDTO(status="X"))

    def test_none_dto_rejected(self, service, order):
        with pytest.raises(InvalidOrder):
            service.update_order(order.id, None)


# ===========================================================================
# delete / queries
# ===========================================================================


class TestDeleteOrder:
    def test_removes_all_lines(self, service, order):
        line_ids = list(order.lines.values_list("id", flat=True))

        service.delete_order(order.id)

        assert not Order.objects.filter(id=order.id).exists()
        for line_id in line_ids:
            assert not OrderLine.objects.filter(id=line_id).exists()

    def test_keeps_products_and_user(self, service, order, user):
        service.delete_order(order.id)
        assert Product.objects.count() == 2
        assert type(user).objects.filter(id=user.id).exists()

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.delete_order(uuid4())


class TestQueries:
    def test_get_order(self, service, order):
        assert service.get_order(order.id).id == order.id

    def test_get_order_not_found(self, service):
        with pytest.raises(OrderNotFound):
            service.get_order("not-a-uuid")

    def test_list_orders_with_filter(self, service, order, user, other_user):
        service.create_order(CreateOrderDTO(user_id=other_user.id))
        assert len(service.list_orders()) == 2
        assert [o.id for o in service.list_orders({"user_id": user.id})] == [order.id]


# ===========================================================================
# End-to-end scenario
# ===========================================================================


def test_build_then_replace_single_line(service, user):
    product = Product.objects.create(name="Gizmo", price=Decimal("20.00"))

    order = service.create_order(
        CreateOrderDTO(user_id=user.id, lines=[_line(product, 2, "20.00")])
    )
    assert order.total_price == Decimal("40.00")
    assert [line.line_total for line in order.lines.all()] == [Decimal("40.00")]

    order = service.update_order(
        order.id, UpdateOrderDTO(lines=[_line(product, 3, "20.00")])
    )
    assert order.total_price == Decimal("60.00")
    assert OrderLine.objects.filter(order_id=order.id).count() == 1
