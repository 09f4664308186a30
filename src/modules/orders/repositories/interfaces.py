"""Order repository interfaces.

Extends ``IRepository`` with the methods required by the Order
aggregate: atomic creation with lines, wholesale line replacement,
row locking for updates, and line look-ups used to keep the order
total consistent.

The Service Layer depends exclusively on these contracts (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderLine


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate owns its OrderLine children.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, order: Order, lines: Sequence[OrderLine]) -> Order:
        """Persist a new order together with its lines atomically."""

    @abstractmethod
    def replace_lines(self, order: Order, lines: Sequence[OrderLine]) -> List[OrderLine]:
        """Delete every existing line of ``order`` and store ``lines`` instead."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock, or ``None``."""

    @abstractmethod
    def line_ids(self, order_id: str) -> List[str]:
        """Return the ids of the lines owned by an order."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with their lines eagerly loaded."""


class IOrderLineRepository(IRepository["OrderLine"]):
    """Repository contract for individual order lines."""

    @abstractmethod
    def line_totals(self, order_id: str) -> List[Decimal]:
        """Return the stored ``line_total`` of every line of an order."""
