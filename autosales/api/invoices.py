from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_only, admin_or_manager, back_office, get_db
from autosales.schemas.common import ListResponse
from autosales.schemas.invoices import InvoiceCreate, InvoiceDetail, InvoiceListResponse, InvoiceRead
from autosales.services import invoices as invoices_service

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post(
    "",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_or_manager)],
)
def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db)):
    return invoices_service.invoices.create(db, payload)


@router.get("", response_model=InvoiceListResponse, dependencies=[Depends(back_office)])
def list_invoices(
    status: str | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return invoices_service.invoices.list_response(db, status, order_by, order_dir, limit, offset)


@router.get("/pending", response_model=ListResponse[InvoiceRead], dependencies=[Depends(admin_or_manager)])
def list_pending_invoices(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return invoices_service.invoices.paginated_response(
        invoices_service.invoices.pending, db, limit, offset
    )


@router.get(
    "/by-client/{client_id}",
    response_model=ListResponse[InvoiceRead],
    dependencies=[Depends(back_office)],
)
def list_invoices_by_client(
    client_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return invoices_service.invoices.paginated_response(
        invoices_service.invoices.by_client, db, client_id, limit, offset
    )


@router.get(
    "/by-quotation/{quotation_id}",
    response_model=InvoiceDetail,
    dependencies=[Depends(back_office)],
)
def get_invoice_by_quotation(quotation_id: str, db: Session = Depends(get_db)):
    return invoices_service.invoices.by_quotation(db, quotation_id)


@router.get("/{invoice_id}", response_model=InvoiceDetail, dependencies=[Depends(back_office)])
def get_invoice(invoice_id: str, db: Session = Depends(get_db)):
    return invoices_service.invoices.get(db, invoice_id)


@router.patch("/{invoice_id}/issue", response_model=InvoiceRead, dependencies=[Depends(admin_or_manager)])
def issue_invoice(invoice_id: str, db: Session = Depends(get_db)):
    return invoices_service.invoices.issue(db, invoice_id)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(admin_only)])
def delete_invoice(invoice_id: str, db: Session = Depends(get_db)):
    invoices_service.invoices.delete(db, invoice_id)
