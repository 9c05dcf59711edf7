"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups orders need
(batch resolution of item products) and stock alert persistence.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable
from uuid import UUID

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import StockAlertThresholdsDTO
    from modules.products.models import Product, StockAlert


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(self) -> "models.QuerySet[Product]":
        """List products with their stock alert bands joined."""

    @abstractmethod
    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        """Resolve several products at once, keyed by ID.  Unknown IDs are omitted."""

    @abstractmethod
    def save_alert_thresholds(
        self, product: Product, dto: StockAlertThresholdsDTO
    ) -> StockAlert:
        """Create or update the stock alert bands of ``product``."""
