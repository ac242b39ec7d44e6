from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from autosales.logging import get_logger
from autosales.models.auth import User
from autosales.models.client import Client
from autosales.models.opportunity import Opportunity
from autosales.models.quotation import Quotation
from autosales.models.stage import Stage
from autosales.models.vehicle import Vehicle
from autosales.queries.opportunities import OpportunityQuery
from autosales.services.common import coerce_uuid
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)

_OPPORTUNITY_LOAD = (
    selectinload(Opportunity.client),
    selectinload(Opportunity.seller),
    selectinload(Opportunity.vehicle),
    selectinload(Opportunity.stage),
    selectinload(Opportunity.quotations).selectinload(Quotation.invoice),
)

_REFERENCES = {
    "client_id": (Client, "Client not found"),
    "user_id": (User, "User not found"),
    "vehicle_id": (Vehicle, "Vehicle not found"),
    "stage_id": (Stage, "Stage not found"),
}


def _validate_references(db: Session, data: dict) -> None:
    """Reject body references to rows that do not exist with a 400."""
    for field, (model, detail) in _REFERENCES.items():
        value = data.get(field)
        if value is None:
            continue
        if not db.get(model, coerce_uuid(value, field)):
            raise HTTPException(status_code=400, detail=detail)


class Opportunities(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        data = payload.model_dump()
        _validate_references(db, data)
        opportunity = Opportunity(**data, is_active=True)
        db.add(opportunity)
        db.commit()
        db.refresh(opportunity)
        logger.info(
            "opportunity_created opportunity_id=%s client_id=%s",
            opportunity.id,
            opportunity.client_id,
        )
        return opportunity

    @staticmethod
    def get(db: Session, opportunity_id: str):
        opportunity = db.get(
            Opportunity,
            coerce_uuid(opportunity_id),
            options=list(_OPPORTUNITY_LOAD),
        )
        if not opportunity:
            raise HTTPException(status_code=404, detail="Opportunity not found")
        return opportunity

    @staticmethod
    def list(
        db: Session,
        client_id: str | None,
        user_id: str | None,
        stage_id: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        return (
            OpportunityQuery(db)
            .options(*_OPPORTUNITY_LOAD)
            .by_client(client_id)
            .by_seller(user_id)
            .by_stage(stage_id)
            .active_only(is_active)
            .order_by(order_by, order_dir)
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def update(db: Session, opportunity_id: str, payload):
        opportunity = Opportunities.get(db, opportunity_id)
        data = payload.model_dump(exclude_unset=True)
        # Only vehicle_id may be cleared; other nulls mean "leave unchanged".
        data = {key: value for key, value in data.items() if value is not None or key == "vehicle_id"}
        _validate_references(db, data)
        for key, value in data.items():
            setattr(opportunity, key, value)
        db.commit()
        db.refresh(opportunity)
        return opportunity

    @staticmethod
    def set_status(db: Session, opportunity_id: str, is_active: bool):
        opportunity = Opportunities.get(db, opportunity_id)
        opportunity.is_active = is_active
        db.commit()
        db.refresh(opportunity)
        logger.info("opportunity_status opportunity_id=%s is_active=%s", opportunity.id, is_active)
        return opportunity

    @staticmethod
    def delete(db: Session, opportunity_id: str) -> None:
        opportunity = Opportunities.get(db, opportunity_id)
        if opportunity.quotations:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete opportunity with associated quotations",
            )
        db.delete(opportunity)
        db.commit()
        logger.info("opportunity_deleted opportunity_id=%s", opportunity_id)


opportunities = Opportunities()
