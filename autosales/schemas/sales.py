from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from autosales.schemas.clients import ClientSummary


class SaleLineCreate(BaseModel):
    vehicle_id: UUID
    # Non-positive quantities are rejected by the service with a 400.
    quantity: int


class SaleCreate(BaseModel):
    client_id: UUID
    vehicles: list[SaleLineCreate] = Field(default_factory=list)


class SaleVehicle(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    make: str
    model: str
    year: int


class SaleLineRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    vehicle_id: UUID
    vehicle: SaleVehicle
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class SaleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    client: ClientSummary
    sold_at: datetime
    total: Decimal
    lines: list[SaleLineRead] = Field(default_factory=list)
