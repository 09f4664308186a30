"""Integration tests for User API endpoints.

Covers:
- CRUD operations via /api/v1/users/.
- Domain exception mapping (400, 404, 409).
- The password hash never appears in responses.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.models import Order
from modules.users.models import User

pytestmark = pytest.mark.integration

URL = "/api/v1/users/"


class TestUserCreate:
    def test_create_success(self, api_client):
        response = api_client.post(
            URL,
            {"username": "carol", "password": "secret1", "email": "carol@example.com"},
            format="json",
        )
        assert response.status_code == 201
        assert response.data["username"] == "carol"
        assert "password" not in response.data
        assert User.objects.get(username="carol").check_password("secret1")

    def test_create_invalid_email(self, api_client):
        response = api_client.post(
            URL,
            {"username": "carol", "password": "secret1", "email": "nope"},
            format="json",
        )
        assert response.status_code == 400

    def test_create_duplicate_username(self, api_client, user):
        response = api_client.post(
            URL,
            {"username": user.username, "password": "secret1", "email": "x@example.com"},
            format="json",
        )
        assert response.status_code == 409


class TestUserReadUpdateDelete:
    def test_list(self, api_client, user, other_user):
        response = api_client.get(URL)
        assert response.status_code == 200
        assert [u["username"] for u in response.data["results"]] == ["alice", "bobby"]

    def test_filter_by_username(self, api_client, user, other_user):
        response = api_client.get(URL, {"username": "bob"})
        assert [u["username"] for u in response.data["results"]] == ["bobby"]

    def test_retrieve(self, api_client, user):
        response = api_client.get(f"{URL}{user.id}/")
        assert response.status_code == 200
        assert response.data["id"] == str(user.id)
        assert response.data["email"] == "alice@example.com"

    def test_retrieve_not_found(self, api_client):
        response = api_client.get(f"{URL}00000000-0000-0000-0000-000000000000/")
        assert response.status_code == 404

    def test_patch_email(self, api_client, user):
        response = api_client.patch(
            f"{URL}{user.id}/", {"email": "new@example.com"}, format="json"
        )
        assert response.status_code == 200
        assert response.data["email"] == "new@example.com"
        assert response.data["username"] == "alice"

    def test_put_to_taken_username(self, api_client, user, other_user):
        response = api_client.put(
            f"{URL}{user.id}/", {"username": other_user.username}, format="json"
        )
        assert response.status_code == 409

    def test_delete(self, api_client, user):
        response = api_client.delete(f"{URL}{user.id}/")
        assert response.status_code == 204
        assert not User.objects.filter(id=user.id).exists()

    def test_delete_user_with_orders(self, api_client, user):
        Order.objects.create(user=user, total_price=Decimal("0.00"))
        response = api_client.delete(f"{URL}{user.id}/")
        assert response.status_code == 409
        assert User.objects.filter(id=user.id).exists()
