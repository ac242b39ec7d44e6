from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from autosales.schemas.auth import SellerContactSummary, SellerSummary
from autosales.schemas.clients import ClientAddressSummary, ClientSummary
from autosales.schemas.quotations import QuotationSummary
from autosales.schemas.stages import StageSummary
from autosales.schemas.vehicles import VehicleDetailSummary, VehicleSummary


class OpportunityCreate(BaseModel):
    client_id: UUID
    user_id: UUID
    vehicle_id: UUID | None = None
    stage_id: UUID


class OpportunityUpdate(BaseModel):
    client_id: UUID | None = None
    user_id: UUID | None = None
    vehicle_id: UUID | None = None
    stage_id: UUID | None = None
    is_active: bool | None = None


class OpportunityStatusUpdate(BaseModel):
    is_active: bool


class OpportunityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: UUID
    user_id: UUID
    vehicle_id: UUID | None = None
    stage_id: UUID
    is_active: bool
    client: ClientSummary
    seller: SellerSummary
    vehicle: VehicleSummary | None = None
    stage: StageSummary
    quotation_count: int = 0
    invoice_count: int = 0
    created_at: datetime
    updated_at: datetime


class OpportunityDetail(OpportunityRead):
    client: ClientAddressSummary
    seller: SellerContactSummary
    vehicle: VehicleDetailSummary | None = None
    quotations: list[QuotationSummary] = Field(default_factory=list)
