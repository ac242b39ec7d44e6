from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_or_manager, get_db, sales_team, seller_or_admin
from autosales.schemas.common import ListResponse
from autosales.schemas.opportunities import (
    OpportunityCreate,
    OpportunityDetail,
    OpportunityRead,
    OpportunityStatusUpdate,
    OpportunityUpdate,
)
from autosales.services import opportunities as opportunities_service

router = APIRouter(prefix="/opportunities", tags=["opportunities"])


@router.get("", response_model=ListResponse[OpportunityRead], dependencies=[Depends(sales_team)])
def list_opportunities(
    client_id: str | None = None,
    user_id: str | None = None,
    stage_id: str | None = None,
    is_active: bool | None = None,
    order_by: str = Query(default="created_at"),
    order_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return opportunities_service.opportunities.list_response(
        db, client_id, user_id, stage_id, is_active, order_by, order_dir, limit, offset
    )


@router.get(
    "/by-client/{client_id}",
    response_model=ListResponse[OpportunityRead],
    dependencies=[Depends(sales_team)],
)
def list_opportunities_by_client(
    client_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return opportunities_service.opportunities.list_response(
        db, client_id, None, None, None, "created_at", "desc", limit, offset
    )


@router.get(
    "/by-user/{user_id}",
    response_model=ListResponse[OpportunityRead],
    dependencies=[Depends(sales_team)],
)
def list_opportunities_by_user(
    user_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return opportunities_service.opportunities.list_response(
        db, None, user_id, None, None, "created_at", "desc", limit, offset
    )


@router.get("/{opportunity_id}", response_model=OpportunityDetail, dependencies=[Depends(sales_team)])
def get_opportunity(opportunity_id: str, db: Session = Depends(get_db)):
    return opportunities_service.opportunities.get(db, opportunity_id)


@router.post(
    "",
    response_model=OpportunityRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(seller_or_admin)],
)
def create_opportunity(payload: OpportunityCreate, db: Session = Depends(get_db)):
    return opportunities_service.opportunities.create(db, payload)


@router.patch("/{opportunity_id}", response_model=OpportunityRead, dependencies=[Depends(seller_or_admin)])
def update_opportunity(opportunity_id: str, payload: OpportunityUpdate, db: Session = Depends(get_db)):
    return opportunities_service.opportunities.update(db, opportunity_id, payload)


@router.patch(
    "/{opportunity_id}/status",
    response_model=OpportunityRead,
    dependencies=[Depends(seller_or_admin)],
)
def set_opportunity_status(
    opportunity_id: str, payload: OpportunityStatusUpdate, db: Session = Depends(get_db)
):
    return opportunities_service.opportunities.set_status(db, opportunity_id, payload.is_active)


@router.delete(
    "/{opportunity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(admin_or_manager)],
)
def delete_opportunity(opportunity_id: str, db: Session = Depends(get_db)):
    opportunities_service.opportunities.delete(db, opportunity_id)
