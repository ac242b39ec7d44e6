import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autosales.db import Base


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    tax_id: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    opportunities = relationship("Opportunity", back_populates="client")
    sales = relationship("Sale", back_populates="client")

    @property
    def opportunity_count(self) -> int:
        return len(self.opportunities)

    @property
    def active_opportunity_count(self) -> int:
        return sum(1 for opportunity in self.opportunities if opportunity.is_active)

    @property
    def quotation_count(self) -> int:
        return sum(len(opportunity.quotations) for opportunity in self.opportunities)
