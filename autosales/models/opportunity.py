import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autosales.db import Base


class Opportunity(Base):
    """A prospective vehicle sale to a client, owned by a seller and tracked
    through the pipeline stages."""

    __tablename__ = "opportunities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("clients.id"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("vehicles.id"))
    stage_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stages.id"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    client = relationship("Client", back_populates="opportunities")
    seller = relationship("User", back_populates="opportunities")
    vehicle = relationship("Vehicle", back_populates="opportunities")
    stage = relationship("Stage", back_populates="opportunities")
    quotations = relationship("Quotation", back_populates="opportunity")

    @property
    def quotation_count(self) -> int:
        return len(self.quotations)

    @property
    def invoice_count(self) -> int:
        return sum(1 for quotation in self.quotations if quotation.invoice is not None)
