"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) is never left half-written: in
particular, replacing items either swaps the whole set or keeps the
old one.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.orders.codes import code_number, next_code
from modules.orders.constants import ORDER_CODE_MAX_RETRIES
from modules.orders.models import (
    Order,
    OrderCodeSequence,
    OrderItem,
    OrderStatusHistory,
)
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def _with_relations():
    return Order.objects.prefetch_related("items__product", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items, retrying on a code collision.

        A concurrent writer can take the same next code between the
        look-up and the insert; the unique constraint rejects the second
        insert and the attempt is repeated with a fresh code.  Codes of
        deleted orders stay taken through ``OrderCodeSequence``.
        """
        for attempt in range(1, ORDER_CODE_MAX_RETRIES + 1):
            code = next_code(self.list_codes(), OrderCodeSequence.current())
            try:
                return self._create_with_code(code, data)
            except IntegrityError:
                logger.warning("order.code_collision", code=code, attempt=attempt)
        raise RuntimeError(
            f"Failed to assign a unique order code after "
            f"{ORDER_CODE_MAX_RETRIES} attempts"
        )

    @transaction.atomic
    def _create_with_code(self, code: str, data: Dict[str, Any]) -> Order:
        order = Order(
            code=code,
            delivery_deadline_days=data.get("delivery_deadline_days"),
            supplier_name=data.get("supplier_name", ""),
            supplier_contact=data.get("supplier_contact", ""),
            created_by=data.get("created_by"),
        )
        order.save()
        OrderCodeSequence.record(code_number(code))

        items = data.get("items", [])
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in items
            ]
        )

        logger.info(
            "order.created",
            order_id=str(order.id),
            code=order.code,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return _with_relations().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self) -> List[Order]:
        return list(_with_relations().order_by("-created_at", "-id"))

    def list_codes(self) -> List[str]:
        return list(Order.objects.values_list("code", flat=True))

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(self, id: str, status: str) -> Optional[Order]:
        try:
            order = Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        if not order:
            return None
        order.status = status
        order.save(update_fields=["status"])
        logger.info("order.status_saved", order_id=str(id), status=status)
        return order

    @transaction.atomic
    def replace_items(self, id: str, items: List[Dict[str, Any]]) -> None:
        deleted, _ = OrderItem.objects.filter(order_id=id).delete()
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order_id=id,
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in items
            ]
        )
        logger.info(
            "order.items_replaced",
            order_id=str(id),
            removed=deleted,
            inserted=len(items),
        )

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order; items and history cascade."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: Any,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user: Any = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user=user,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history
