"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: patch input for product updates.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from modules.core.dtos import PatchDTO
from modules.core.money import MONEY_LIMIT, fits_money_field

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Product name is required.")
    if not NAME_MIN_LENGTH <= len(v) <= NAME_MAX_LENGTH:
        raise ValueError(
            f"Product name must be between {NAME_MIN_LENGTH} and "
            f"{NAME_MAX_LENGTH} characters."
        )
    return v


def _check_price(v: Decimal) -> Decimal:
    if not fits_money_field(v):
        raise ValueError(
            f"Price must be below {MONEY_LIMIT} with at most two decimal places."
        )
    if v < 0:
        raise ValueError("Price cannot be negative.")
    return v


def _check_stock(v: int) -> int:
    if v < 0:
        raise ValueError("Stock quantity cannot be negative.")
    return v


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is 2-100 characters after trimming.
    - ``price`` is a non-negative Decimal with at most two places.
    - ``stock_quantity`` is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    stock_quantity: int = 0

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        return _check_stock(v)


class UpdateProductDTO(PatchDTO):
    """Patch DTO for product updates.

    ``stock_quantity`` is applied only when the caller sends it, so a
    request that omits it never resets the stock to zero.
    """

    name: str | None = None
    price: Decimal | None = None
    stock_quantity: int | None = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        return v if v is None else _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal | None) -> Decimal | None:
        return v if v is None else _check_price(v)

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int | None) -> int | None:
        return v if v is None else _check_stock(v)
