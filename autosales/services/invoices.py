from datetime import UTC, datetime

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from autosales.logging import get_logger
from autosales.models.enums import InvoiceStatus
from autosales.models.invoice import Invoice
from autosales.models.opportunity import Opportunity
from autosales.models.quotation import Quotation, QuotationItem
from autosales.queries.invoices import InvoiceQuery
from autosales.services.common import coerce_uuid, round_money
from autosales.services.numbering import generate_invoice_number
from autosales.services.response import ListResponseMixin
from autosales.telemetry import get_tracer

logger = get_logger(__name__)

_INVOICE_LOAD = (
    selectinload(Invoice.quotation)
    .selectinload(Quotation.opportunity)
    .selectinload(Opportunity.client),
    selectinload(Invoice.quotation)
    .selectinload(Quotation.opportunity)
    .selectinload(Opportunity.seller),
    selectinload(Invoice.quotation)
    .selectinload(Quotation.opportunity)
    .selectinload(Opportunity.vehicle),
    selectinload(Invoice.quotation)
    .selectinload(Quotation.items)
    .selectinload(QuotationItem.vehicle),
)


def status_counts(db: Session) -> dict[InvoiceStatus, int]:
    rows = db.query(Invoice.status, func.count(Invoice.id)).group_by(Invoice.status).all()
    counts = {status: 0 for status in InvoiceStatus}
    for status, count in rows:
        counts[status] = count
    return counts


class Invoices(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        with get_tracer(__name__).start_as_current_span("invoices.create"):
            quotation = db.get(Quotation, payload.quotation_id)
            if not quotation:
                raise HTTPException(status_code=400, detail="Quotation not found")
            if not quotation.is_active:
                raise HTTPException(status_code=400, detail="Cannot invoice an inactive quotation")
            if InvoiceQuery(db).by_quotation(quotation.id).exists():
                raise HTTPException(status_code=400, detail="Quotation has already been invoiced")
            invoice = Invoice(
                quotation_id=quotation.id,
                number=generate_invoice_number(db),
                status=InvoiceStatus.pending,
                total=round_money(quotation.total),
            )
            db.add(invoice)
            db.commit()
            db.refresh(invoice)
            logger.info(
                "invoice_created invoice_id=%s number=%s quotation_id=%s",
                invoice.id,
                invoice.number,
                quotation.id,
            )
            return invoice

    @staticmethod
    def get(db: Session, invoice_id: str):
        invoice = db.get(Invoice, coerce_uuid(invoice_id), options=list(_INVOICE_LOAD))
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return invoice

    @staticmethod
    def list(
        db: Session,
        status: str | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        return (
            InvoiceQuery(db)
            .options(*_INVOICE_LOAD)
            .by_status(status)
            .order_by(order_by, order_dir)
            .paginate(limit, offset)
            .all()
        )

    @classmethod
    def list_response(cls, db, *args, **kwargs):
        response = super().list_response(db, *args, **kwargs)
        counts = status_counts(db)
        response["issued_count"] = counts[InvoiceStatus.issued]
        response["pending_count"] = counts[InvoiceStatus.pending]
        return response

    @staticmethod
    def pending(db: Session, limit: int, offset: int):
        return (
            InvoiceQuery(db)
            .options(*_INVOICE_LOAD)
            .by_status(InvoiceStatus.pending)
            .order_by("created_at", "asc")
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def by_client(db: Session, client_id: str, limit: int, offset: int):
        return (
            InvoiceQuery(db)
            .options(*_INVOICE_LOAD)
            .by_client(client_id)
            .order_by("created_at", "desc")
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def by_quotation(db: Session, quotation_id: str):
        invoice = InvoiceQuery(db).options(*_INVOICE_LOAD).by_quotation(quotation_id).first()
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return invoice

    @staticmethod
    def issue(db: Session, invoice_id: str):
        invoice = Invoices.get(db, invoice_id)
        if invoice.status == InvoiceStatus.issued:
            raise HTTPException(status_code=400, detail="Invoice has already been issued")
        invoice.status = InvoiceStatus.issued
        invoice.issued_at = datetime.now(UTC)
        db.commit()
        db.refresh(invoice)
        logger.info("invoice_issued invoice_id=%s number=%s", invoice.id, invoice.number)
        return invoice

    @staticmethod
    def delete(db: Session, invoice_id: str) -> None:
        invoice = Invoices.get(db, invoice_id)
        if invoice.status == InvoiceStatus.issued:
            raise HTTPException(status_code=400, detail="Cannot delete an issued invoice")
        db.delete(invoice)
        db.commit()
        logger.info("invoice_deleted invoice_id=%s", invoice_id)


invoices = Invoices()
