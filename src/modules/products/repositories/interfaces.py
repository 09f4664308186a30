"""Product repository interface.

``get_by_id`` doubles as the product look-up used by the order
aggregate: it returns ``None`` for a missing product and never raises.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_many(self, ids: Iterable[str]) -> Dict[str, Product]:
        """Return the existing products among ``ids``, keyed by string id."""
