from fastapi import HTTPException
from sqlalchemy.orm import Session

from autosales.logging import get_logger
from autosales.models.opportunity import Opportunity
from autosales.models.stage import Stage
from autosales.services.common import apply_ordering, apply_pagination, coerce_uuid
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)


def _ensure_unique_stage(db: Session, name: str | None, order: int | None, exclude_id=None) -> None:
    query = db.query(Stage)
    if exclude_id is not None:
        query = query.filter(Stage.id != exclude_id)
    if name is not None and query.filter(Stage.name == name).first():
        raise HTTPException(status_code=400, detail="A stage with this name already exists")
    if order is not None and query.filter(Stage.order == order).first():
        raise HTTPException(status_code=400, detail="A stage with this order already exists")


class Stages(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        data = payload.model_dump()
        data["name"] = data["name"].strip()
        _ensure_unique_stage(db, data["name"], data["order"])
        stage = Stage(**data)
        db.add(stage)
        db.commit()
        db.refresh(stage)
        logger.info("stage_created stage_id=%s name=%s", stage.id, stage.name)
        return stage

    @staticmethod
    def get(db: Session, stage_id: str):
        stage = db.get(Stage, coerce_uuid(stage_id))
        if not stage:
            raise HTTPException(status_code=404, detail="Stage not found")
        return stage

    @staticmethod
    def list(
        db: Session,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = apply_ordering(
            db.query(Stage),
            order_by,
            order_dir,
            {"order": Stage.order, "name": Stage.name, "created_at": Stage.created_at},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def update(db: Session, stage_id: str, payload):
        stage = Stages.get(db, stage_id)
        data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
        if "name" in data:
            data["name"] = data["name"].strip()
        _ensure_unique_stage(db, data.get("name"), data.get("order"), exclude_id=stage.id)
        for key, value in data.items():
            setattr(stage, key, value)
        db.commit()
        db.refresh(stage)
        return stage

    @staticmethod
    def delete(db: Session, stage_id: str) -> None:
        stage = Stages.get(db, stage_id)
        in_use = db.query(Opportunity.id).filter(Opportunity.stage_id == stage.id).first()
        if in_use:
            raise HTTPException(status_code=400, detail="Cannot delete stage used by opportunities")
        db.delete(stage)
        db.commit()
        logger.info("stage_deleted stage_id=%s", stage_id)


stages = Stages()
