"""Integration tests for standardized pagination."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def product_batch():
    """Create a batch of products for pagination tests."""
    products = [
        Product(name=f"Product {idx:03d}", price=Decimal("9.99"), stock_quantity=10)
        for idx in range(1, 121)
    ]
    Product.objects.bulk_create(products)
    return products


class TestPagination:
    def test_default_page_size(self, api_client, product_batch):
        response = api_client.get("/api/v1/products/")
        assert response.status_code == 200
        assert len(response.data["results"]) == 20
        assert response.data["count"] == 120
        assert response.data["next"] is not None

    def test_custom_page_size(self, api_client, product_batch):
        response = api_client.get("/api/v1/products/", {"page_size": 50})
        assert len(response.data["results"]) == 50

    def test_page_size_capped(self, api_client, product_batch):
        response = api_client.get("/api/v1/products/", {"page_size": 500})
        assert len(response.data["results"]) == 100

    def test_last_page(self, api_client, product_batch):
        response = api_client.get("/api/v1/products/", {"page": 6})
        assert len(response.data["results"]) == 20
        assert response.data["next"] is None
