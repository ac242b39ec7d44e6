"""Base query builder class.

Wraps a SQLAlchemy ``Query`` in a small fluent interface so services can
compose filters, ordering and pagination without repeating boilerplate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, Self, TypeVar

from sqlalchemy.orm import Query

from autosales.services.common import apply_ordering, apply_pagination

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseQuery(Generic[T]):
    """Base class for composable query builders.

    Subclasses set ``model_class`` and ``ordering_fields`` and add
    domain filters that return a clone, so every step is side-effect free.
    """

    model_class: type[T]
    ordering_fields: ClassVar[dict[str, Any]] = {}

    def __init__(self, db: Session):
        self.db = db
        self._query: Query = db.query(self.model_class)

    def _clone(self) -> Self:
        new = self.__class__.__new__(self.__class__)
        new.db = self.db
        new._query = self._query
        return new

    def _filter(self, *criteria) -> Self:
        clone = self._clone()
        clone._query = clone._query.filter(*criteria)
        return clone

    # -------------------------------------------------------------------------
    # Common filters
    # -------------------------------------------------------------------------

    def active_only(self, active: bool | None = True) -> Self:
        """Filter by ``is_active``; ``None`` leaves the query untouched."""
        is_active_col = getattr(self.model_class, "is_active", None)
        if active is None or is_active_col is None:
            return self
        return self._filter(is_active_col.is_(active))

    def options(self, *loader_options) -> Self:
        clone = self._clone()
        clone._query = clone._query.options(*loader_options)
        return clone

    # -------------------------------------------------------------------------
    # Ordering and pagination
    # -------------------------------------------------------------------------

    def order_by(self, field: str, direction: str = "asc") -> Self:
        """Order by a whitelisted field; unknown fields raise a 400."""
        clone = self._clone()
        clone._query = apply_ordering(clone._query, field, direction.lower(), self.ordering_fields)
        return clone

    def paginate(self, limit: int = 50, offset: int = 0) -> Self:
        clone = self._clone()
        clone._query = apply_pagination(clone._query, limit, offset)
        return clone

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def all(self) -> list[T]:
        return self._query.all()

    def first(self) -> T | None:
        return self._query.first()

    def count(self) -> int:
        return self._query.count()

    def exists(self) -> bool:
        return self.db.query(self._query.exists()).scalar()
