from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from autosales.schemas.auth import SellerSummary
from autosales.schemas.stages import StageSummary
from autosales.schemas.vehicles import VehicleSummary


class ClientBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    tax_id: str = Field(min_length=1, max_length=50)
    address: str = Field(min_length=1)
    email: EmailStr | None = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    tax_id: str | None = Field(default=None, min_length=1, max_length=50)
    address: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None


class ClientRead(ClientBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None = None
    opportunity_count: int = 0
    active_opportunity_count: int = 0
    quotation_count: int = 0
    created_at: datetime
    updated_at: datetime


class ClientOpportunitySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    seller: SellerSummary
    vehicle: VehicleSummary | None = None
    stage: StageSummary
    is_active: bool
    quotation_count: int = 0
    created_at: datetime


class ClientDetail(ClientRead):
    opportunities: list[ClientOpportunitySummary] = Field(default_factory=list)


class ClientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class ClientTaxSummary(ClientSummary):
    tax_id: str


class ClientAddressSummary(ClientTaxSummary):
    address: str
