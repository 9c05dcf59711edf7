"""Product service layer (Use Cases).

Read access to the catalog plus maintenance of per-product stock
alert bands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from django.db import models

    from modules.products.dtos import StockAlertThresholdsDTO
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def list_products(self) -> models.QuerySet[Product]:
        return self._repo.list()

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def set_alert_thresholds(self, id: str, dto: StockAlertThresholdsDTO) -> Product:
        """Create or replace the stock alert bands of a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self.get_product(id)
        self._repo.save_alert_thresholds(product, dto)
        logger.info("product.alert_thresholds_updated", product_id=str(id))
        return self.get_product(id)
