"""Order DRF serializers for API output.

The serializers operate at the Interface layer (API Views) and are
read-only: incoming payloads are validated by the Pydantic DTOs in
``dtos.py`` and handled by the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    """Read serializer for a line with its product name."""

    order_id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderLine
        fields = [
            "id",
            "order_id",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "line_total",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested lines."""

    user_id = serializers.UUIDField(read_only=True)
    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "order_date",
            "status",
            "total_price",
            "lines",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested lines)."""

    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "order_date",
            "status",
            "total_price",
            "created_at",
        ]
        read_only_fields = fields
