"""Query builders for database operations.

Usage:
    from autosales.queries import OpportunityQuery

    results = (
        OpportunityQuery(db)
        .by_client(client_id)
        .active_only()
        .order_by("created_at", "desc")
        .paginate(limit=50, offset=0)
        .all()
    )
"""

from autosales.queries.base import BaseQuery
from autosales.queries.invoices import InvoiceQuery
from autosales.queries.opportunities import OpportunityQuery, QuotationQuery
from autosales.queries.vehicles import VehicleQuery

__all__ = [
    "BaseQuery",
    "InvoiceQuery",
    "OpportunityQuery",
    "QuotationQuery",
    "VehicleQuery",
]
