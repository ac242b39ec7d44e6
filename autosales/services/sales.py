from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from autosales.logging import get_logger
from autosales.models.client import Client
from autosales.models.sale import Sale, SaleLine
from autosales.models.vehicle import Vehicle
from autosales.services.common import apply_ordering, apply_pagination, coerce_uuid, round_money
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)

_SALE_LOAD = (
    selectinload(Sale.client),
    selectinload(Sale.lines).selectinload(SaleLine.vehicle),
)


class Sales(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        if not payload.vehicles:
            raise HTTPException(status_code=400, detail="A sale needs at least one vehicle")
        if not db.get(Client, payload.client_id):
            raise HTTPException(status_code=400, detail="Client not found")
        sale = Sale(client_id=payload.client_id)
        total = Decimal("0.00")
        for entry in payload.vehicles:
            if entry.quantity <= 0:
                raise HTTPException(status_code=400, detail="Vehicle quantity must be greater than zero")
            vehicle = db.get(Vehicle, entry.vehicle_id)
            if not vehicle:
                raise HTTPException(status_code=400, detail=f"Vehicle {entry.vehicle_id} not found")
            # Lines keep the price in force at the time of sale.
            line = SaleLine(vehicle_id=vehicle.id, quantity=entry.quantity, unit_price=vehicle.price)
            sale.lines.append(line)
            total += Decimal(vehicle.price) * entry.quantity
        sale.total = round_money(total)
        db.add(sale)
        db.commit()
        db.refresh(sale)
        logger.info("sale_created sale_id=%s client_id=%s total=%s", sale.id, sale.client_id, sale.total)
        return sale

    @staticmethod
    def get(db: Session, sale_id: str):
        sale = db.get(Sale, coerce_uuid(sale_id), options=list(_SALE_LOAD))
        if not sale:
            raise HTTPException(status_code=404, detail="Sale not found")
        return sale

    @staticmethod
    def list(
        db: Session,
        client_id: str | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = db.query(Sale).options(*_SALE_LOAD)
        if client_id:
            query = query.filter(Sale.client_id == coerce_uuid(client_id, "client_id"))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"sold_at": Sale.sold_at, "total": Sale.total},
        )
        return apply_pagination(query, limit, offset).all()


sales = Sales()
