"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: a single line item (product + quantity).
- ``CreateOrderDTO``: input for order creation.
- ``ReplaceItemsDTO``: input for wholesale item replacement.
- ``OrderListFiltersDTO``: substring filters for the order list.
- ``OrderScheduleDTO``: the fields the alert classifier reads.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional
from uuid import UUID

from django.utils import timezone
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

if TYPE_CHECKING:
    from modules.orders.models import Order


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order line item."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


def _validate_items(items: List[CreateOrderItemDTO]) -> List[CreateOrderItemDTO]:
    if not items:
        raise ValueError("Order must have at least one item.")
    product_ids = [item.product_id for item in items]
    if len(product_ids) != len(set(product_ids)):
        raise ValueError("Duplicate product IDs are not allowed in the same order.")
    return items


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``delivery_deadline_days`` is the supplier lead time.  Orders created
    without it never enter date-based alerting.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]
    delivery_deadline_days: Optional[int] = None
    supplier_name: str = ""
    supplier_contact: str = ""

    @field_validator("items")
    @classmethod
    def items_must_be_valid(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        return _validate_items(v)

    @field_validator("delivery_deadline_days")
    @classmethod
    def deadline_must_be_positive(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("Delivery deadline must be at least 1 day.")
        return v


class ReplaceItemsDTO(BaseModel):
    """Immutable DTO carrying the full new item set of an order."""

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_be_valid(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        return _validate_items(v)


class OrderListFiltersDTO(BaseModel):
    """Case-insensitive substring filters; blank values are ignored."""

    model_config = ConfigDict(frozen=True)

    code: Optional[str] = None
    date: Optional[str] = None
    status: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def blank_means_absent(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: (value.strip() or None) if isinstance(value, str) else value
                for key, value in data.items()
            }
        return data

    @property
    def is_empty(self) -> bool:
        return not (self.code or self.date or self.status)


# ---------------------------------------------------------------------------
# Classifier input
# ---------------------------------------------------------------------------


def _local_naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or timezone.is_naive(value):
        return value
    return timezone.make_naive(value)


class OrderScheduleDTO(BaseModel):
    """Immutable snapshot of the order fields that drive alerting.

    Timestamps are naive and expressed in the project's local time zone,
    so calendar-day arithmetic matches what users see on screen.
    """

    model_config = ConfigDict(frozen=True)

    manual_status: str
    created_at: Optional[datetime] = None
    delivery_deadline_days: Optional[int] = None
    expected_delivery_date: Optional[datetime] = None

    @classmethod
    def from_entity(cls, order: Order) -> OrderScheduleDTO:
        return cls(
            manual_status=str(order.status),
            created_at=_local_naive(order.created_at),
            delivery_deadline_days=order.delivery_deadline_days,
            expected_delivery_date=_local_naive(order.expected_delivery_date),
        )
