from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class VehicleBase(BaseModel):
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=150)
    year: int = Field(ge=1900, le=2100)
    price: Decimal = Field(ge=0, max_digits=18, decimal_places=2)


class VehicleCreate(VehicleBase):
    pass


class VehicleUpdate(BaseModel):
    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=150)
    year: int | None = Field(default=None, ge=1900, le=2100)
    price: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)


class VehicleRead(VehicleBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class VehicleSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    make: str
    model: str


class VehicleDetailSummary(VehicleSummary):
    year: int
    price: Decimal
