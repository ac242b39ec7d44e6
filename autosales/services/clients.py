from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from autosales.logging import get_logger
from autosales.models.client import Client
from autosales.models.opportunity import Opportunity
from autosales.queries.opportunities import OpportunityQuery
from autosales.services.common import apply_ordering, apply_pagination, coerce_uuid, require_min_length
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)

_CLIENT_LOAD = selectinload(Client.opportunities).selectinload(Opportunity.quotations)


def _ensure_unique_tax_id(db: Session, tax_id: str, exclude_id=None) -> None:
    query = db.query(Client).filter(Client.tax_id == tax_id)
    if exclude_id is not None:
        query = query.filter(Client.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="A client with this tax ID already exists")


class Clients(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        data = payload.model_dump()
        data["tax_id"] = data["tax_id"].strip()
        _ensure_unique_tax_id(db, data["tax_id"])
        client = Client(**data)
        db.add(client)
        db.commit()
        db.refresh(client)
        logger.info("client_created client_id=%s", client.id)
        return client

    @staticmethod
    def get(db: Session, client_id: str):
        client = db.get(Client, coerce_uuid(client_id), options=[_CLIENT_LOAD])
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    @staticmethod
    def list(
        db: Session,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Client).options(_CLIENT_LOAD)
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"created_at": Client.created_at, "name": Client.name, "tax_id": Client.tax_id},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def search_by_name(db: Session, name: str, limit: int, offset: int):
        term = require_min_length(name, "Search term")
        query = (
            db.query(Client)
            .options(_CLIENT_LOAD)
            .filter(func.lower(Client.name).contains(term.lower(), autoescape=True))
            .order_by(Client.name.asc())
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def get_by_tax_id(db: Session, tax_id: str):
        client = db.query(Client).options(_CLIENT_LOAD).filter(Client.tax_id == tax_id.strip()).first()
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    @staticmethod
    def update(db: Session, client_id: str, payload):
        client = Clients.get(db, client_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("tax_id") is not None:
            data["tax_id"] = data["tax_id"].strip()
            _ensure_unique_tax_id(db, data["tax_id"], exclude_id=client.id)
        for key, value in data.items():
            if value is None and key != "email":
                continue
            setattr(client, key, value)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete(db: Session, client_id: str) -> None:
        client = Clients.get(db, client_id)
        if client.opportunities:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete client with associated opportunities",
            )
        db.delete(client)
        db.commit()
        logger.info("client_deleted client_id=%s", client_id)

    @staticmethod
    def list_opportunities(db: Session, client_id: str):
        client = Clients.get(db, client_id)
        return OpportunityQuery(db).by_client(client.id).order_by("created_at", "desc").all()


clients = Clients()
