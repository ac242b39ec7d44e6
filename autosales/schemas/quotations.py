from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from autosales.schemas.vehicles import VehicleSummary


class QuotationCreate(BaseModel):
    opportunity_id: UUID
    is_active: bool = True


class QuotationStatusUpdate(BaseModel):
    is_active: bool


class QuotationItemBase(BaseModel):
    quotation_id: UUID
    vehicle_id: UUID
    description: str | None = Field(default=None, max_length=250)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal = Field(ge=0, max_digits=18, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0.00"), ge=0, max_digits=18, decimal_places=2)


class QuotationItemCreate(QuotationItemBase):
    pass


class QuotationItemUpdate(BaseModel):
    vehicle_id: UUID | None = None
    description: str | None = Field(default=None, max_length=250)
    quantity: int | None = Field(default=None, ge=1)
    unit_price: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)
    discount: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=2)


class QuotationItemRead(QuotationItemBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    total: Decimal
    vehicle: VehicleSummary | None = None
    created_at: datetime
    updated_at: datetime


class QuotationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    opportunity_id: UUID
    is_active: bool
    total: Decimal
    item_count: int = 0
    invoice_count: int = 0
    created_at: datetime
    updated_at: datetime


class QuotationDetail(QuotationRead):
    items: list[QuotationItemRead] = Field(default_factory=list)


class QuotationSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    is_active: bool
    total: Decimal
    item_count: int = 0
    invoice_count: int = 0
