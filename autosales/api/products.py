from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import authenticated, get_db, inventory_or_admin
from autosales.schemas.common import ListResponse
from autosales.schemas.products import ProductCreate, ProductRead, ProductUpdate
from autosales.services import products as products_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ListResponse[ProductRead], dependencies=[Depends(authenticated)])
def list_products(
    order_by: str = Query(default="name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return products_service.products.list_response(db, order_by, order_dir, limit, offset)


@router.get("/{name}", response_model=ProductRead, dependencies=[Depends(authenticated)])
def get_product(name: str, db: Session = Depends(get_db)):
    return products_service.products.get(db, name)


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(inventory_or_admin)],
)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return products_service.products.create(db, payload)


@router.put("/{name}", response_model=ProductRead, dependencies=[Depends(inventory_or_admin)])
def replace_product(name: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    return products_service.products.replace(db, name, payload)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(inventory_or_admin)])
def delete_product(name: str, db: Session = Depends(get_db)):
    products_service.products.delete(db, name)
