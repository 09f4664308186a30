"""Integration tests for the /api/v1/order-lines/ endpoints."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.models import Order, OrderLine

pytestmark = pytest.mark.integration

URL = "/api/v1/order-lines/"


@pytest.fixture()
def order(api_client, user, product_a):
    response = api_client.post(
        "/api/v1/orders/",
        {
            "user_id": str(user.id),
            "lines": [{"product_id": str(product_a.id), "quantity": 2, "unit_price": "10.00"}],
        },
        format="json",
    )
    return Order.objects.get(id=response.data["id"])


def _order_total(order) -> Decimal:
    order.refresh_from_db()
    return order.total_price


class TestOrderLineAPI:
    def test_create(self, api_client, order, product_b):
        response = api_client.post(
            URL,
            {
                "order_id": str(order.id),
                "product_id": str(product_b.id),
                "quantity": 3,
                "unit_price": "5.00",
            },
            format="json",
        )
        assert response.status_code == 201
        assert response.data["line_total"] == "15.00"
        assert response.data["order_id"] == str(order.id)
        assert _order_total(order) == Decimal("35.00")

    def test_create_unknown_order(self, api_client, product_b):
        response = api_client.post(
            URL,
            {"order_id": str(uuid4()), "product_id": str(product_b.id), "quantity": 1, "unit_price": "1.00"},
            format="json",
        )
        assert response.status_code == 404

    def test_create_bad_quantity(self, api_client, order, product_b):
        response = api_client.post(
            URL,
            {"order_id": str(order.id), "product_id": str(product_b.id), "quantity": 0, "unit_price": "1.00"},
            format="json",
        )
        assert response.status_code == 400

    def test_list_filtered_by_order(self, api_client, order):
        response = api_client.get(URL, {"order": str(order.id)})
        assert response.status_code == 200
        assert response.data["count"] == 1

    def test_patch_quantity(self, api_client, order):
        line = OrderLine.objects.get(order_id=order.id)
        response = api_client.patch(f"{URL}{line.id}/", {"quantity": 4}, format="json")
        assert response.status_code == 200
        assert response.data["line_total"] == "40.00"
        assert response.data["unit_price"] == "10.00"
        assert _order_total(order) == Decimal("40.00")

    def test_delete(self, api_client, order):
        line = OrderLine.objects.get(order_id=order.id)
        response = api_client.delete(f"{URL}{line.id}/")
        assert response.status_code == 204
        assert _order_total(order) == Decimal("0.00")

    def test_retrieve_not_found(self, api_client):
        assert api_client.get(f"{URL}{uuid4()}/").status_code == 404
