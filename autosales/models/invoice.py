import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autosales.db import Base
from autosales.models.enums import InvoiceStatus


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    quotation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("quotations.id"), nullable=False, unique=True
    )
    number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    status: Mapped[InvoiceStatus] = mapped_column(Enum(InvoiceStatus), default=InvoiceStatus.pending)
    total: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0.00"))
    issued_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    quotation = relationship("Quotation", back_populates="invoice")

    @property
    def opportunity(self):
        return self.quotation.opportunity if self.quotation else None

    @property
    def client(self):
        opportunity = self.opportunity
        return opportunity.client if opportunity else None

    @property
    def seller(self):
        opportunity = self.opportunity
        return opportunity.seller if opportunity else None

    @property
    def vehicle(self):
        opportunity = self.opportunity
        return opportunity.vehicle if opportunity else None

    @property
    def items(self):
        return self.quotation.items if self.quotation else []
