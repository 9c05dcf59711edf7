"""Product DRF serializers for API input/output."""

from __future__ import annotations

from dataclasses import asdict

from rest_framework import serializers

from modules.products.models import Product


class StockAlertThresholdsSerializer(serializers.Serializer):
    """Validates the stock alert bands payload."""

    green_min = serializers.IntegerField(min_value=0)
    green_max = serializers.IntegerField(min_value=0)
    yellow_min = serializers.IntegerField(min_value=0)
    yellow_max = serializers.IntegerField(min_value=0)
    red_max = serializers.IntegerField(min_value=0)


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for products with their current stock level."""

    stock_level = serializers.CharField(read_only=True)
    alert_thresholds = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "code",
            "name",
            "color",
            "current_stock",
            "stock_level",
            "alert_thresholds",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_alert_thresholds(self, obj: Product) -> dict:
        return asdict(obj.thresholds)
