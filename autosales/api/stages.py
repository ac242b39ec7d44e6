from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from autosales.api.deps import admin_only, authenticated, get_db
from autosales.schemas.common import ListResponse
from autosales.schemas.stages import StageCreate, StageRead, StageUpdate
from autosales.services import stages as stages_service

router = APIRouter(prefix="/stages", tags=["stages"])


@router.get("", response_model=ListResponse[StageRead], dependencies=[Depends(authenticated)])
def list_stages(
    order_by: str = Query(default="order"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return stages_service.stages.list_response(db, order_by, order_dir, limit, offset)


@router.get("/{stage_id}", response_model=StageRead, dependencies=[Depends(authenticated)])
def get_stage(stage_id: str, db: Session = Depends(get_db)):
    return stages_service.stages.get(db, stage_id)


@router.post(
    "",
    response_model=StageRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(admin_only)],
)
def create_stage(payload: StageCreate, db: Session = Depends(get_db)):
    return stages_service.stages.create(db, payload)


@router.patch("/{stage_id}", response_model=StageRead, dependencies=[Depends(admin_only)])
def update_stage(stage_id: str, payload: StageUpdate, db: Session = Depends(get_db)):
    return stages_service.stages.update(db, stage_id, payload)


@router.delete("/{stage_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(admin_only)])
def delete_stage(stage_id: str, db: Session = Depends(get_db)):
    stages_service.stages.delete(db, stage_id)
