"""Query builder for invoices."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from autosales.models.enums import InvoiceStatus
from autosales.models.invoice import Invoice
from autosales.models.opportunity import Opportunity
from autosales.models.quotation import Quotation
from autosales.queries.base import BaseQuery
from autosales.services.common import coerce_uuid, validate_enum

if TYPE_CHECKING:
    from uuid import UUID


class InvoiceQuery(BaseQuery[Invoice]):
    model_class = Invoice
    ordering_fields: ClassVar[dict[str, Any]] = {
        "created_at": Invoice.created_at,
        "issued_at": Invoice.issued_at,
        "number": Invoice.number,
        "total": Invoice.total,
    }

    def by_status(self, status: InvoiceStatus | str | None) -> InvoiceQuery:
        if not status:
            return self
        status = validate_enum(status, InvoiceStatus, "status")
        return self._filter(Invoice.status == status)

    def by_quotation(self, quotation_id: UUID | str | None) -> InvoiceQuery:
        if not quotation_id:
            return self
        return self._filter(Invoice.quotation_id == coerce_uuid(quotation_id, "quotation_id"))

    def by_client(self, client_id: UUID | str | None) -> InvoiceQuery:
        if not client_id:
            return self
        clone = self._clone()
        clone._query = (
            clone._query.join(Quotation, Invoice.quotation_id == Quotation.id)
            .join(Opportunity, Quotation.opportunity_id == Opportunity.id)
            .filter(Opportunity.client_id == coerce_uuid(client_id, "client_id"))
        )
        return clone
