"""Order service layer (Use Cases).

Orchestrates order creation, manual status changes, item replacement,
deletion, and the classified order list.  All write operations are
atomic: the service defines the unit-of-work boundary.

Business rules enforced:
- Every item must reference an existing product.
- New orders start as ``emitido`` with a freshly assigned code.
- Status changes accept any known status from any status; there is no
  transition table.  Each change is recorded in the history.
- Items can be replaced only while the order is editable.
- Open orders can be deleted only while editable; closed orders
  (cancelled, returned, received) can always be deleted.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, List, Optional, Union

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.orders.assembler import ClassifiedOrder, assemble, classify_order
from modules.orders.constants import DEFAULT_AWAITING_DELIVERY_DAYS, OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderNotDeletable,
    OrderNotEditable,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.exporter import export_csv

if TYPE_CHECKING:
    from modules.orders.dtos import (
        CreateOrderDTO,
        CreateOrderItemDTO,
        OrderListFiltersDTO,
        ReplaceItemsDTO,
    )
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def local_today() -> datetime:
    """Current wall-clock time in the project time zone, without tzinfo."""
    return timezone.make_naive(timezone.now())


def awaiting_delivery_days() -> int:
    return getattr(
        settings, "ORDER_AWAITING_DELIVERY_DAYS", DEFAULT_AWAITING_DELIVERY_DAYS
    )


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO, user: Any = None) -> Order:
        """Create a new ``emitido`` order with its items.

        Raises:
            ProductNotFound: an item references an unknown product.
        """
        log = logger.bind(item_count=len(dto.items))
        log.info("order.creation_started")

        items = self._resolve_items(dto.items)
        order = self._order_repo.create(
            {
                "items": items,
                "delivery_deadline_days": dto.delivery_deadline_days,
                "supplier_name": dto.supplier_name,
                "supplier_contact": dto.supplier_contact,
                "created_by": user,
            }
        )
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.EMITIDO,
            notes="Pedido emitido",
            user=user,
        )

        log.info("order.created", order_id=str(order.id), code=order.code)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(
        self,
        order_id: Any,
        new_status: str,
        notes: str = "",
        user: Any = None,
    ) -> Order:
        """Set the manual status of an order.

        Raises:
            InvalidOrderStatus: ``new_status`` is not a known status.
            OrderNotFound: order does not exist.
        """
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(f"Unknown order status '{new_status}'.")

        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        old_status = order.status
        log = logger.bind(
            order_id=str(order_id),
            current_status=old_status,
            new_status=new_status,
        )

        if not self._order_repo.update_status(str(order_id), new_status):
            raise OrderNotFound(f"Order {order_id} not found.")
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
            user=user,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order_id))

    @transaction.atomic
    def replace_items(
        self,
        order_id: Any,
        dto: ReplaceItemsDTO,
        now: Optional[datetime] = None,
    ) -> Order:
        """Swap the whole item set of an editable order.

        Raises:
            OrderNotFound: order does not exist.
            OrderNotEditable: edit window closed, or order cancelled/returned.
            ProductNotFound: an item references an unknown product.
        """
        order = self.get_order(str(order_id))
        log = logger.bind(order_id=str(order_id), status=order.status)

        if not order.is_editable(now):
            log.warning("order.edit_rejected")
            raise OrderNotEditable(f"Order {order.code} can no longer be edited.")

        items = self._resolve_items(dto.items)
        self._order_repo.replace_items(str(order_id), items)

        log.info("order.items_updated", item_count=len(items))
        return self._order_repo.get_by_id(str(order_id))

    @transaction.atomic
    def delete_order(self, order_id: Any, now: Optional[datetime] = None) -> None:
        """Delete an order that is closed or still inside its edit window.

        Raises:
            OrderNotFound: order does not exist.
            OrderNotDeletable: open order past its edit window.
        """
        order = self.get_order(str(order_id))
        if not order.can_be_deleted(now):
            logger.warning(
                "order.delete_rejected", order_id=str(order_id), status=order.status
            )
            raise OrderNotDeletable(f"Order {order.code} can no longer be deleted.")
        self._order_repo.delete(str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def classify(
        self, order: Order, today: Optional[Union[date, datetime]] = None
    ) -> ClassifiedOrder:
        return classify_order(order, today or local_today(), awaiting_delivery_days())

    def list_orders(
        self,
        filters: Optional[OrderListFiltersDTO] = None,
        today: Optional[Union[date, datetime]] = None,
    ) -> List[ClassifiedOrder]:
        """Load every order, classify against one ``today``, filter and sort."""
        today = today or local_today()
        orders = self._order_repo.list()
        result = assemble(orders, filters, today, awaiting_delivery_days())
        logger.info("order.list_assembled", loaded=len(orders), returned=len(result))
        return result

    def export_orders(
        self,
        filters: Optional[OrderListFiltersDTO] = None,
        today: Optional[Union[date, datetime]] = None,
    ) -> str:
        """CSV of the items of every listed order, in list order."""
        classified = self.list_orders(filters, today)
        return export_csv(item.order for item in classified)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_items(self, items: List[CreateOrderItemDTO]) -> List[dict]:
        products = self._product_repo.get_many(item.product_id for item in items)
        missing = [str(item.product_id) for item in items if item.product_id not in products]
        if missing:
            raise ProductNotFound(f"Product(s) not found: {', '.join(missing)}.")
        return [
            {"product_id": item.product_id, "quantity": item.quantity}
            for item in items
        ]
