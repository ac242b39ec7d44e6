from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from autosales.models.enums import InvoiceStatus
from autosales.schemas.auth import SellerSummary
from autosales.schemas.clients import ClientTaxSummary
from autosales.schemas.common import ListResponse
from autosales.schemas.quotations import QuotationItemRead
from autosales.schemas.vehicles import VehicleDetailSummary


class InvoiceCreate(BaseModel):
    quotation_id: UUID


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    quotation_id: UUID
    number: str
    status: InvoiceStatus
    total: Decimal
    issued_at: datetime | None = None
    client: ClientTaxSummary | None = None
    seller: SellerSummary | None = None
    created_at: datetime
    updated_at: datetime


class InvoiceDetail(InvoiceRead):
    vehicle: VehicleDetailSummary | None = None
    items: list[QuotationItemRead] = Field(default_factory=list)


class InvoiceListResponse(ListResponse[InvoiceRead]):
    issued_count: int = 0
    pending_count: int = 0
