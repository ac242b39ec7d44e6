from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_or_manager, get_db, sales_team, seller_or_admin
from autosales.schemas.common import ListResponse
from autosales.schemas.quotations import (
    QuotationCreate,
    QuotationDetail,
    QuotationItemCreate,
    QuotationItemRead,
    QuotationItemUpdate,
    QuotationRead,
    QuotationStatusUpdate,
)
from autosales.services import quotations as quotations_service

router = APIRouter(prefix="/quotations", tags=["quotations"])
items_router = APIRouter(prefix="/quotation-items", tags=["quotations"])


@router.get("", response_model=ListResponse[QuotationRead], dependencies=[Depends(sales_team)])
def list_quotations(
    opportunity_id: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return quotations_service.quotations.list_response(
        db, opportunity_id, is_active, order_by, order_dir, limit, offset
    )


@router.get("/{quotation_id}", response_model=QuotationDetail, dependencies=[Depends(sales_team)])
def get_quotation(quotation_id: str, db: Session = Depends(get_db)):
    return quotations_service.quotations.get(db, quotation_id)


@router.post(
    "",
    response_model=QuotationRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(seller_or_admin)],
)
def create_quotation(payload: QuotationCreate, db: Session = Depends(get_db)):
    return quotations_service.quotations.create(db, payload)


@router.patch(
    "/{quotation_id}/status",
    response_model=QuotationRead,
    dependencies=[Depends(seller_or_admin)],
)
def set_quotation_status(
    quotation_id: str, payload: QuotationStatusUpdate, db: Session = Depends(get_db)
):
    return quotations_service.quotations.set_status(db, quotation_id, payload.is_active)


@router.delete(
    "/{quotation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_or_manager)],
)
def delete_quotation(quotation_id: str, db: Session = Depends(get_db)):
    quotations_service.quotations.delete(db, quotation_id)


@items_router.post(
    "",
    response_model=QuotationItemRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(seller_or_admin)],
)
def create_quotation_item(payload: QuotationItemCreate, db: Session = Depends(get_db)):
    return quotations_service.quotation_items.create(db, payload)


@items_router.get(
    "/by-quotation/{quotation_id}",
    response_model=ListResponse[QuotationItemRead],
    dependencies=[Depends(seller_or_admin)],
)
def list_quotation_items(
    quotation_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return quotations_service.quotation_items.list_response(db, quotation_id, limit, offset)


@items_router.get("/{item_id}", response_model=QuotationItemRead, dependencies=[Depends(seller_or_admin)])
def get_quotation_item(item_id: str, db: Session = Depends(get_db)):
    return quotations_service.quotation_items.get(db, item_id)


@items_router.patch("/{item_id}", response_model=QuotationItemRead, dependencies=[Depends(seller_or_admin)])
def update_quotation_item(item_id: str, payload: QuotationItemUpdate, db: Session = Depends(get_db)):
    return quotations_service.quotation_items.update(db, item_id, payload)


@items_router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(seller_or_admin)],
)
def delete_quotation_item(item_id: str, db: Session = Depends(get_db)):
    quotations_service.quotation_items.delete(db, item_id)
