"""Product catalog and per-product stock alert thresholds.

Orders only need a product snapshot (code, name, color) for display and
export; ``current_stock`` feeds the color-coded stock alert.
"""

from __future__ import annotations

import structlog
from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel
from modules.products.alerts import StockLevel, StockThresholds, classify_stock

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Catalog entry referenced by order items.

    ``code`` is stripped and uppercased on save so "ab-01" and "AB-01"
    cannot coexist.
    """

    code = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    color = models.CharField(max_length=64, blank=True, default="")
    current_stock = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name"]

    @property
    def thresholds(self) -> StockThresholds:
        alert = getattr(self, "stock_alert", None)
        if alert is None:
            return StockThresholds()
        return alert.as_thresholds()

    @property
    def stock_level(self) -> StockLevel:
        return classify_stock(self.current_stock, self.thresholds)

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.code:
            self.code = self.code.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                code=self.code,
                name=self.name,
            )

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"


class StockAlert(BaseModel):
    """Custom stock bands for one product.

    Products without a row fall back to the default bands in
    ``StockThresholds``.
    """

    product = models.OneToOneField(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="stock_alert",
    )
    green_min = models.PositiveIntegerField()
    green_max = models.PositiveIntegerField()
    yellow_min = models.PositiveIntegerField()
    yellow_max = models.PositiveIntegerField()
    red_max = models.PositiveIntegerField()

    class Meta:
        db_table = "stock_alerts"

    def clean(self) -> None:
        super().clean()
        if self.green_min > self.green_max:
            raise ValidationError({"green_min": "Must not exceed green_max."})
        if self.yellow_min > self.yellow_max:
            raise ValidationError({"yellow_min": "Must not exceed yellow_max."})

    def as_thresholds(self) -> StockThresholds:
        return StockThresholds(
            green_min=self.green_min,
            green_max=self.green_max,
            yellow_min=self.yellow_min,
            yellow_max=self.yellow_max,
            red_max=self.red_max,
        )

    def __str__(self) -> str:
        return f"Alert bands for {self.product}"
