"""Order, OrderItem, OrderStatusHistory and OrderCodeSequence models.

Business rules implemented:
- ``code`` is a human-readable sequence ("01", "02", ...) assigned by the
  repository on creation; it is unique and never reused, even after the
  order is deleted (see ``OrderCodeSequence``).
- ``expected_delivery_date`` is derived once, on creation, as
  ``created_at + delivery_deadline_days`` and never recomputed.
- Items may be replaced only inside the edit window (24 h after creation)
  and never on cancelled or returned orders.
- Each status change generates an append-only history record.
- Alert color and status label are not stored: see ``modules.orders.alerts``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    DEFAULT_EDIT_WINDOW_HOURS,
    STANDBY_STATES,
    TERMINAL_STATES,
    OrderStatus,
)


def edit_window() -> timedelta:
    hours = getattr(settings, "ORDER_EDIT_WINDOW_HOURS", DEFAULT_EDIT_WINDOW_HOURS)
    return timedelta(hours=hours)


class Order(BaseModel):
    """Purchase order placed with a supplier.

    ``status`` is only ever changed by an explicit user action; the
    automatic progression users see (in transit, awaiting, overdue) is
    the derived alert, not a stored status.
    """

    code: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.EMITIDO,
    )
    delivery_deadline_days: models.PositiveIntegerField = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
    )
    expected_delivery_date: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )
    supplier_name: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    supplier_contact: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    created_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Edit / delete rules
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def is_editable(self, now: Optional[datetime] = None) -> bool:
        """Items may be replaced within the edit window of a non-standby order."""
        if self.status in STANDBY_STATES:
            return False
        now = now or timezone.now()
        return now - self.created_at <= edit_window()

    def can_be_deleted(self, now: Optional[datetime] = None) -> bool:
        """Open orders are deletable inside the edit window; closed ones always."""
        return self.is_terminal or self.is_editable(now)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if (
            is_new
            and self.delivery_deadline_days
            and self.expected_delivery_date is None
        ):
            self.expected_delivery_date = self.created_at + timedelta(
                days=self.delivery_deadline_days
            )
            super().save(update_fields=["expected_delivery_date", "updated_at"])

    def __str__(self) -> str:
        return f"Pedido {self.code} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product} x{self.quantity}"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for manual status changes.

    ``user`` is nullable: ``None`` means the change was not attributed
    to an authenticated user.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"


class OrderCodeSequence(models.Model):
    """Single-row high-water mark of issued order codes.

    Deleting orders never lowers ``last_number``.
    """

    SINGLETON_ID = 1

    id: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        primary_key=True, default=SINGLETON_ID, editable=False
    )
    last_number: models.PositiveIntegerField = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "order_code_sequence"

    @classmethod
    def current(cls) -> int:
        value = (
            cls.objects.filter(pk=cls.SINGLETON_ID)
            .values_list("last_number", flat=True)
            .first()
        )
        return value or 0

    @classmethod
    def record(cls, number: int) -> None:
        """Raise the mark to ``number``; lower values are ignored."""
        sequence, _ = cls.objects.select_for_update().get_or_create(
            pk=cls.SINGLETON_ID
        )
        if number > sequence.last_number:
            sequence.last_number = number
            sequence.save(update_fields=["last_number"])

    def __str__(self) -> str:
        return f"Último pedido: {self.last_number:02d}"
