"""Query builders for opportunities and their quotations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from autosales.models.opportunity import Opportunity
from autosales.models.quotation import Quotation
from autosales.queries.base import BaseQuery
from autosales.services.common import coerce_uuid

if TYPE_CHECKING:
    from uuid import UUID


class OpportunityQuery(BaseQuery[Opportunity]):
    """Query builder for Opportunity.

    Usage:
        opportunities = (
            OpportunityQuery(db)
            .by_client(client_id)
            .by_stage(stage_id)
            .active_only()
            .order_by("created_at", "desc")
            .paginate(50, 0)
            .all()
        )
    """

    model_class = Opportunity
    ordering_fields: ClassVar[dict[str, Any]] = {
        "created_at": Opportunity.created_at,
        "updated_at": Opportunity.updated_at,
    }

    def by_client(self, client_id: UUID | str | None) -> OpportunityQuery:
        if not client_id:
            return self
        return self._filter(Opportunity.client_id == coerce_uuid(client_id, "client_id"))

    def by_seller(self, user_id: UUID | str | None) -> OpportunityQuery:
        if not user_id:
            return self
        return self._filter(Opportunity.user_id == coerce_uuid(user_id, "user_id"))

    def by_stage(self, stage_id: UUID | str | None) -> OpportunityQuery:
        if not stage_id:
            return self
        return self._filter(Opportunity.stage_id == coerce_uuid(stage_id, "stage_id"))


class QuotationQuery(BaseQuery[Quotation]):
    model_class = Quotation
    ordering_fields: ClassVar[dict[str, Any]] = {
        "created_at": Quotation.created_at,
        "updated_at": Quotation.updated_at,
        "total": Quotation.total,
    }

    def by_opportunity(self, opportunity_id: UUID | str | None) -> QuotationQuery:
        if not opportunity_id:
            return self
        return self._filter(
            Quotation.opportunity_id == coerce_uuid(opportunity_id, "opportunity_id")
        )

    def excluding(self, quotation_id: UUID | str | None) -> QuotationQuery:
        """Drop one quotation from the result, typically the one being edited."""
        if not quotation_id:
            return self
        return self._filter(Quotation.id != coerce_uuid(quotation_id))
