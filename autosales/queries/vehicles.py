"""Query builder for the vehicle catalogue."""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy import func, or_

from autosales.models.vehicle import Vehicle
from autosales.queries.base import BaseQuery


class VehicleQuery(BaseQuery[Vehicle]):
    model_class = Vehicle
    ordering_fields: ClassVar[dict[str, Any]] = {
        "make": Vehicle.make,
        "model": Vehicle.model,
        "year": Vehicle.year,
        "price": Vehicle.price,
        "created_at": Vehicle.created_at,
    }

    def make_contains(self, term: str | None) -> VehicleQuery:
        if not term:
            return self
        return self._filter(func.lower(Vehicle.make).contains(term.lower(), autoescape=True))

    def search(self, term: str | None) -> VehicleQuery:
        """Case-insensitive substring match on make or model."""
        if not term:
            return self
        needle = term.lower()
        return self._filter(
            or_(
                func.lower(Vehicle.make).contains(needle, autoescape=True),
                func.lower(Vehicle.model).contains(needle, autoescape=True),
            )
        )

    def then_by(self, *fields: str) -> VehicleQuery:
        """Append secondary ordering on whitelisted columns."""
        clone = self._clone()
        for field in fields:
            clone._query = clone._query.order_by(self.ordering_fields[field].asc())
        return clone
