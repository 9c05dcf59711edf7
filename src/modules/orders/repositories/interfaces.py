"""Order repository interface.

Extends ``IRepository[Order]`` with the operations required by the
Order aggregate: creation with items, wholesale item replacement,
status updates with history, and code look-up.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``items`` (list of dicts with ``product_id``
        and ``quantity``) and may include ``delivery_deadline_days``,
        ``supplier_name``, ``supplier_contact`` and ``created_by``.
        The order code is assigned here.
        """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched items, products and history."""

    @abstractmethod
    def list(self) -> List[Order]:
        """All orders with items and products, newest first."""

    @abstractmethod
    def list_codes(self) -> List[str]:
        """Every order code currently stored."""

    @abstractmethod
    def update_status(self, id: str, status: str) -> Optional[Order]:
        """Persist a new manual status.  Returns ``None`` if the order is gone."""

    @abstractmethod
    def replace_items(self, id: str, items: List[Dict[str, Any]]) -> None:
        """Delete every item of the order and insert ``items`` in one transaction."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Hard-delete an order with its items and history."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user: Any = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
