"""Order API views.

Exposes ``OrderService`` and ``OrderLineService`` via HTTP using DRF
ViewSets.  Domain exceptions are caught and translated into
appropriate HTTP status codes; the views never swallow generic
exceptions.

PUT and PATCH share merge semantics: fields left out of the body (or
sent as ``null``) keep their stored value.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.payloads import request_payload
from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderLineDTO,
    UpdateOrderDTO,
    UpdateOrderLineDTO,
)
from modules.orders.exceptions import (
    InvalidOrder,
    InvalidOrderLine,
    OrderLineNotFound,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter, OrderLineFilter
from modules.orders.models import Order, OrderLine
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderLineDjangoRepository,
)
from modules.orders.serializers import (
    OrderLineSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderLineService, OrderService
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.exceptions import UserNotFound
from modules.users.repositories.django_repository import UserDjangoRepository

NOT_FOUND_ERRORS = (OrderNotFound, OrderLineNotFound, UserNotFound, ProductNotFound)
INVALID_ERRORS = (InvalidOrder, InvalidOrderLine, PydanticValidationError)


def _not_found(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)


def _bad_request(exc: Exception) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class OrderViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all writes go through
    the service/repository layer.
    """

    filterset_class = OrderFilter
    ordering_fields = ["order_date", "total_price", "status", "created_at"]
    ordering = ["-order_date", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = Order.objects.all()
    serializer_class = OrderListSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            user_repository=UserDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound as exc:
            return _not_found(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        try:
            dto = CreateOrderDTO.model_validate(request_payload(request))
            order = self._service.create_order(dto)
        except NOT_FOUND_ERRORS as exc:
            return _not_found(exc)
        except INVALID_ERRORS as exc:
            return _bad_request(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/orders/{pk}/"""
        try:
            dto = UpdateOrderDTO.model_validate(request_payload(request))
            order = self._service.update_order(pk, dto)
        except NOT_FOUND_ERRORS as exc:
            return _not_found(exc)
        except INVALID_ERRORS as exc:
            return _bad_request(exc)
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(pk)
        except OrderNotFound as exc:
            return _not_found(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderLineViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for individual order lines.

    Every write keeps the owning order's ``total_price`` in step.
    """

    filterset_class = OrderLineFilter
    ordering_fields = ["created_at", "line_total", "quantity"]
    ordering = ["created_at", "id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = OrderLine.objects.select_related("product")
    serializer_class = OrderLineSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderLineService(
            order_line_repository=OrderLineDjangoRepository(),
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/order-lines/{pk}/"""
        try:
            line = self._service.get_order_line(pk)
        except OrderLineNotFound as exc:
            return _not_found(exc)
        return Response(OrderLineSerializer(line).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/order-lines/"""
        try:
            dto = CreateOrderLineDTO.model_validate(request_payload(request))
            line = self._service.add_order_line(dto)
        except NOT_FOUND_ERRORS as exc:
            return _not_found(exc)
        except INVALID_ERRORS as exc:
            return _bad_request(exc)
        return Response(OrderLineSerializer(line).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/order-lines/{pk}/"""
        try:
            dto = UpdateOrderLineDTO.model_validate(request_payload(request))
            line = self._service.update_order_line(pk, dto)
        except NOT_FOUND_ERRORS as exc:
            return _not_found(exc)
        except INVALID_ERRORS as exc:
            return _bad_request(exc)
        return Response(OrderLineSerializer(line).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/order-lines/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/order-lines/{pk}/"""
        try:
            self._service.delete_order_line(pk)
        except OrderLineNotFound as exc:
            return _not_found(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
