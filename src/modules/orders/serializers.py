"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.

Output serializers read ``ClassifiedOrder`` objects (order + derived
alert), not bare ``Order`` rows.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderItemInputSerializer(serializers.Serializer):
    """Validates a single item of an order payload."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    items = OrderItemInputSerializer(many=True, allow_empty=False)
    delivery_deadline_days = serializers.IntegerField(
        min_value=1, required=False, allow_null=True, default=None
    )
    supplier_name = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=255
    )
    supplier_contact = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=255
    )


class ReplaceItemsSerializer(serializers.Serializer):
    """Validates the item replacement payload."""

    items = OrderItemInputSerializer(many=True, allow_empty=False)


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class OrderListQuerySerializer(serializers.Serializer):
    code = serializers.CharField(required=False, allow_blank=True)
    date = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the product snapshot."""

    product_code = serializers.CharField(source="product.code", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_color = serializers.CharField(source="product.color", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_code",
            "product_name",
            "product_color",
            "quantity",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.Serializer):
    """Order row of the list screen: identity, dates and derived alert."""

    id = serializers.UUIDField(source="order.id", read_only=True)
    code = serializers.CharField(source="order.code", read_only=True)
    status = serializers.CharField(source="order.status", read_only=True)
    created_at = serializers.DateTimeField(source="order.created_at", read_only=True)
    delivery_deadline_days = serializers.IntegerField(
        source="order.delivery_deadline_days", read_only=True
    )
    expected_delivery_date = serializers.DateTimeField(
        source="order.expected_delivery_date", read_only=True
    )
    supplier_name = serializers.CharField(source="order.supplier_name", read_only=True)
    alert_color = serializers.CharField(source="alert.alert_color", read_only=True)
    status_display = serializers.CharField(source="alert.status_display", read_only=True)
    days_remaining = serializers.IntegerField(
        source="alert.days_remaining", read_only=True, allow_null=True
    )


class OrderSerializer(OrderListSerializer):
    """Full order with supplier contact, items and history."""

    supplier_contact = serializers.CharField(
        source="order.supplier_contact", read_only=True
    )
    updated_at = serializers.DateTimeField(source="order.updated_at", read_only=True)
    items = OrderItemSerializer(source="order.items.all", many=True, read_only=True)
    status_history = StatusHistorySerializer(
        source="order.status_history.all", many=True, read_only=True
    )
