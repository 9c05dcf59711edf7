"""Product DTOs for the Service Layer.

- ``StockAlertThresholdsDTO``: input for creating/updating a product's
  stock alert bands.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StockAlertThresholdsDTO(BaseModel):
    """Immutable DTO for stock alert bands.

    Validates that every value is non-negative and that each band's
    minimum does not exceed its maximum.
    """

    model_config = ConfigDict(frozen=True)

    green_min: int = Field(ge=0)
    green_max: int = Field(ge=0)
    yellow_min: int = Field(ge=0)
    yellow_max: int = Field(ge=0)
    red_max: int = Field(ge=0)

    @model_validator(mode="after")
    def bands_must_be_ordered(self):
        if self.green_min > self.green_max:
            raise ValueError("green_min must not exceed green_max.")
        if self.yellow_min > self.yellow_max:
            raise ValueError("yellow_min must not exceed yellow_max.")
        return self
