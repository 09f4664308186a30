"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

Line quantities and unit prices are deliberately loose here: the
pricing rules in ``modules.orders.pricing`` are the single place that
decides whether a line is valid, and they report ``InvalidOrderLine``.

- ``OrderLineRequestDTO``: a proposed line inside an order payload.
- ``CreateOrderDTO``: input for order creation (nested lines).
- ``UpdateOrderDTO``: patch input for order updates.
- ``CreateOrderLineDTO``: input for adding a line to an existing order.
- ``UpdateOrderLineDTO``: patch input for a single line.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.core.dtos import PatchDTO
from modules.orders.constants import STATUS_MAX_LENGTH


def _check_status(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Status cannot be blank.")
    if len(v) > STATUS_MAX_LENGTH:
        raise ValueError(f"Status must be at most {STATUS_MAX_LENGTH} characters.")
    return v


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


class OrderLineRequestDTO(BaseModel):
    """Immutable DTO for one proposed line.

    ``unit_price`` is the price the caller agreed to; it is stored as-is
    and never re-read from the product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``order_date`` defaults to the creation time and ``status`` to
    ``PENDING`` when omitted.  An empty ``lines`` list is accepted and
    yields a zero total.
    """

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    order_date: Optional[datetime] = None
    status: Optional[str] = None
    lines: List[OrderLineRequestDTO] = Field(default_factory=list)

    @field_validator("status")
    @classmethod
    def status_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        return _check_status(v)


class UpdateOrderDTO(PatchDTO):
    """Patch DTO for order updates.

    ``total_price`` is accepted for compatibility with clients that
    echo the order back; it is range-checked by the service and then
    discarded in favour of the computed total.
    """

    order_date: Optional[datetime] = None
    status: Optional[str] = None
    user_id: Optional[UUID] = None
    total_price: Optional[Decimal] = None
    lines: Optional[List[OrderLineRequestDTO]] = None

    @field_validator("status")
    @classmethod
    def status_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        return _check_status(v)


# ---------------------------------------------------------------------------
# Order lines
# ---------------------------------------------------------------------------


class CreateOrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID
    product_id: UUID
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None


class UpdateOrderLineDTO(PatchDTO):
    """Patch DTO for a single line; the owning order cannot be changed."""

    product_id: Optional[UUID] = None
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None
