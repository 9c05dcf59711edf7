"""Color-coded stock level classification.

Bands are checked green, then yellow, then red.  A stock value that falls
in a gap between bands (or above ``green_max``) gets no color.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models


class StockLevel(models.TextChoices):
    VERDE = "verde", "Verde"
    AMARELO = "amarelo", "Amarelo"
    VERMELHO = "vermelho", "Vermelho"
    SEM_COR = "sem_cor", "Sem alerta"


@dataclass(frozen=True)
class StockThresholds:
    green_min: int = 501
    green_max: int = 1000
    yellow_min: int = 201
    yellow_max: int = 500
    red_max: int = 200


def classify_stock(stock: int, thresholds: StockThresholds | None = None) -> StockLevel:
    bands = thresholds or StockThresholds()
    if bands.green_min <= stock <= bands.green_max:
        return StockLevel.VERDE
    if bands.yellow_min <= stock <= bands.yellow_max:
        return StockLevel.AMARELO
    if stock <= bands.red_max:
        return StockLevel.VERMELHO
    return StockLevel.SEM_COR
