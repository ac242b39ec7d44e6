from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    price: Decimal = Field(gt=0, max_digits=18, decimal_places=2)
    quantity: int = Field(default=0, ge=0)
    description: str = Field(min_length=1)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    """Full replacement; ``name`` must match the product addressed by the path."""


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime
