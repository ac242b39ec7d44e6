from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_or_manager, authenticated, get_db, sales_team, seller_or_admin
from autosales.schemas.clients import ClientCreate, ClientDetail, ClientRead, ClientUpdate
from autosales.schemas.common import ListResponse
from autosales.schemas.opportunities import OpportunityRead
from autosales.services import clients as clients_service

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(seller_or_admin)],
)
def create_client(payload: ClientCreate, db: Session = Depends(get_db)):
    return clients_service.clients.create(db, payload)


@router.get("", response_model=ListResponse[ClientRead], dependencies=[Depends(authenticated)])
def list_clients(
    order_by: str = Query(default="name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return clients_service.clients.list_response(db, order_by, order_dir, limit, offset)


@router.get("/by-name/{name}", response_model=ListResponse[ClientRead], dependencies=[Depends(authenticated)])
def search_clients_by_name(
    name: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return clients_service.clients.paginated_response(
        clients_service.clients.search_by_name, db, name, limit, offset
    )


@router.get("/by-tax-id/{tax_id}", response_model=ClientRead, dependencies=[Depends(authenticated)])
def get_client_by_tax_id(tax_id: str, db: Session = Depends(get_db)):
    return clients_service.clients.get_by_tax_id(db, tax_id)


@router.get("/{client_id}", response_model=ClientDetail, dependencies=[Depends(authenticated)])
def get_client(client_id: str, db: Session = Depends(get_db)):
    return clients_service.clients.get(db, client_id)


@router.patch("/{client_id}", response_model=ClientRead, dependencies=[Depends(seller_or_admin)])
def update_client(client_id: str, payload: ClientUpdate, db: Session = Depends(get_db)):
    return clients_service.clients.update(db, client_id, payload)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_or_manager)],
)
def delete_client(client_id: str, db: Session = Depends(get_db)):
    clients_service.clients.delete(db, client_id)


@router.get(
    "/{client_id}/opportunities",
    response_model=list[OpportunityRead],
    dependencies=[Depends(sales_team)],
)
def list_client_opportunities(client_id: str, db: Session = Depends(get_db)):
    return clients_service.clients.list_opportunities(db, client_id)
