"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the Service Layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.dtos import StockAlertThresholdsDTO
from modules.products.models import Product, StockAlert
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.select_related("stock_alert").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self) -> models.QuerySet[Product]:
        return Product.objects.select_related("stock_alert")

    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        return {product.id: product for product in Product.objects.filter(id__in=list(ids))}

    @transaction.atomic
    def save_alert_thresholds(
        self, product: Product, dto: StockAlertThresholdsDTO
    ) -> StockAlert:
        alert, created = StockAlert.objects.update_or_create(
            product=product,
            defaults=dto.model_dump(),
        )
        logger.info(
            "product.alert_thresholds_saved",
            product_id=str(product.id),
            created=created,
        )
        return alert
