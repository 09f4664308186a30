from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.products.models import Product
from modules.users.models import User


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    """A persisted shop user."""
    account = User(username="alice", email="alice@example.com")
    account.set_password("secret1")
    account.save()
    return account


@pytest.fixture()
def other_user():
    account = User(username="bobby", email="bob@example.com")
    account.set_password("secret2")
    account.save()
    return account


@pytest.fixture()
def product_a():
    return Product.objects.create(
        name="Product A",
        price=Decimal("10.00"),
        stock_quantity=100,
    )


@pytest.fixture()
def product_b():
    return Product.objects.create(
        name="Product B",
        price=Decimal("5.00"),
        stock_quantity=50,
    )
