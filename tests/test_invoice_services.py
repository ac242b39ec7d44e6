"""Tests for invoice services and numbering."""

import re
import uuid
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from fastapi import HTTPException

from autosales.models.enums import InvoiceStatus
from autosales.models.invoice import Invoice
from autosales.models.quotation import Quotation, QuotationItem
from autosales.schemas.invoices import InvoiceCreate
from autosales.services import invoices as invoices_service
from autosales.services import numbering

INVOICE_NUMBER = re.compile(r"^FACT-\d{8}-[0-9A-F]{6}$")


@pytest.fixture()
def priced_quotation(db_session, quotation, vehicle):
    db_session.add(
        QuotationItem(
            quotation_id=quotation.id,
            vehicle_id=vehicle.id,
            quantity=1,
            unit_price=Decimal("35000.00"),
            discount=Decimal("500.00"),
            total=Decimal("34500.00"),
        )
    )
    quotation.total = Decimal("34500.00")
    db_session.commit()
    return quotation


def test_generate_invoice_number_format(db_session):
    number = numbering.generate_invoice_number(db_session, datetime(2024, 3, 9, tzinfo=UTC))
    assert INVOICE_NUMBER.match(number)
    assert number.startswith("FACT-20240309-")


def test_generate_invoice_number_retries_on_collision(db_session, priced_quotation, monkeypatch):
    """Test a colliding suffix is drawn again."""
    now = datetime(2024, 3, 9, tzinfo=UTC)
    db_session.add(
        Invoice(
            quotation_id=priced_quotation.id,
            number="FACT-20240309-AAAAAA",
            total=Decimal("1.00"),
        )
    )
    db_session.commit()
    suffixes = iter(["aaaaaa", "bbbbbb"])
    monkeypatch.setattr(numbering.secrets, "token_hex", lambda _n: next(suffixes))
    assert numbering.generate_invoice_number(db_session, now) == "FACT-20240309-BBBBBB"


def test_create_invoice(db_session, priced_quotation):
    """Test invoicing copies the quotation total and starts pending."""
    invoice = invoices_service.invoices.create(
        db_session, InvoiceCreate(quotation_id=priced_quotation.id)
    )
    assert invoice.status == InvoiceStatus.pending
    assert invoice.total == Decimal("34500.00")
    assert invoice.issued_at is None
    assert INVOICE_NUMBER.match(invoice.number)
    assert invoice.client.id == priced_quotation.opportunity.client_id


def test_create_invoice_unknown_quotation(db_session):
    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.create(db_session, InvoiceCreate(quotation_id=uuid.uuid4()))
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Quotation not found"


def test_create_invoice_inactive_quotation(db_session, priced_quotation):
    priced_quotation.is_active = False
    db_session.commit()
    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.create(
            db_session, InvoiceCreate(quotation_id=priced_quotation.id)
        )
    assert exc_info.value.status_code == 400


def test_create_invoice_twice(db_session, priced_quotation):
    """Test a quotation is invoiced at most once."""
    invoices_service.invoices.create(db_session, InvoiceCreate(quotation_id=priced_quotation.id))
    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.create(
            db_session, InvoiceCreate(quotation_id=priced_quotation.id)
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Quotation has already been invoiced"


def test_issue_invoice(db_session, priced_quotation):
    invoice = invoices_service.invoices.create(
        db_session, InvoiceCreate(quotation_id=priced_quotation.id)
    )
    issued = invoices_service.invoices.issue(db_session, str(invoice.id))
    assert issued.status == InvoiceStatus.issued
    assert issued.issued_at is not None

    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.issue(db_session, str(invoice.id))
    assert exc_info.value.status_code == 400


def test_delete_issued_invoice(db_session, priced_quotation):
    invoice = invoices_service.invoices.create(
        db_session, InvoiceCreate(quotation_id=priced_quotation.id)
    )
    invoices_service.invoices.issue(db_session, str(invoice.id))
    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.delete(db_session, str(invoice.id))
    assert exc_info.value.status_code == 400


def test_delete_pending_invoice(db_session, priced_quotation):
    invoice = invoices_service.invoices.create(
        db_session, InvoiceCreate(quotation_id=priced_quotation.id)
    )
    invoices_service.invoices.delete(db_session, str(invoice.id))
    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.get(db_session, str(invoice.id))
    assert exc_info.value.status_code == 404


def test_list_response_counts_statuses(db_session, priced_quotation, opportunity):
    """Test the list envelope reports issued and pending totals."""
    first = invoices_service.invoices.create(
        db_session, InvoiceCreate(quotation_id=priced_quotation.id)
    )
    invoices_service.invoices.issue(db_session, str(first.id))
    priced_quotation.is_active = False
    db_session.commit()
    second_quotation = Quotation(opportunity_id=opportunity.id, is_active=True)
    db_session.add(second_quotation)
    db_session.commit()
    invoices_service.invoices.create(db_session, InvoiceCreate(quotation_id=second_quotation.id))

    response = invoices_service.invoices.list_response(db_session, None, "created_at", "desc", 50, 0)
    assert response["count"] == 2
    assert response["issued_count"] == 1
    assert response["pending_count"] == 1

    pending = invoices_service.invoices.pending(db_session, 50, 0)
    assert [invoice.quotation_id for invoice in pending] == [second_quotation.id]


def test_by_client_and_by_quotation(db_session, priced_quotation, opportunity):
    invoice = invoices_service.invoices.create(
        db_session, InvoiceCreate(quotation_id=priced_quotation.id)
    )
    by_client = invoices_service.invoices.by_client(db_session, str(opportunity.client_id), 50, 0)
    assert [item.id for item in by_client] == [invoice.id]
    assert invoices_service.invoices.by_client(db_session, str(uuid.uuid4()), 50, 0) == []

    found = invoices_service.invoices.by_quotation(db_session, str(priced_quotation.id))
    assert found.id == invoice.id
    assert [item.total for item in found.items] == [Decimal("34500.00")]

    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.by_quotation(db_session, str(uuid.uuid4()))
    assert exc_info.value.status_code == 404


def test_list_invalid_status(db_session):
    with pytest.raises(HTTPException) as exc_info:
        invoices_service.invoices.list(db_session, "paid", "created_at", "desc", 50, 0)
    assert exc_info.value.status_code == 400
