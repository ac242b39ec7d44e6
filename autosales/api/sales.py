from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import get_db, sales_team, seller_or_admin
from autosales.schemas.common import ListResponse
from autosales.schemas.sales import SaleCreate, SaleRead
from autosales.services import sales as sales_service

router = APIRouter(prefix="/sales", tags=["sales"])


@router.post(
    "",
    response_model=SaleRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(seller_or_admin)],
)
def create_sale(payload: SaleCreate, db: Session = Depends(get_db)):
    return sales_service.sales.create(db, payload)


@router.get("", response_model=ListResponse[SaleRead], dependencies=[Depends(sales_team)])
def list_sales(
    client_id: str | None = None,
    order_by: str = Query(default="sold_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return sales_service.sales.list_response(db, client_id, order_by, order_dir, limit, offset)


@router.get("/{sale_id}", response_model=SaleRead, dependencies=[Depends(sales_team)])
def get_sale(sale_id: str, db: Session = Depends(get_db)):
    return sales_service.sales.get(db, sale_id)
