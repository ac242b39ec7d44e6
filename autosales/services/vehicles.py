from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from autosales.logging import get_logger
from autosales.models.opportunity import Opportunity
from autosales.models.quotation import QuotationItem
from autosales.models.sale import SaleLine
from autosales.models.vehicle import Vehicle
from autosales.queries.vehicles import VehicleQuery
from autosales.services.common import coerce_uuid, require_min_length, round_money
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)


def _ensure_unique_vehicle(db: Session, make: str, model: str, year: int, exclude_id=None) -> None:
    query = (
        db.query(Vehicle)
        .filter(Vehicle.make == make)
        .filter(Vehicle.model == model)
        .filter(Vehicle.year == year)
    )
    if exclude_id is not None:
        query = query.filter(Vehicle.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=400,
            detail="A vehicle with this make, model and year already exists",
        )


def _is_referenced(db: Session, vehicle_id) -> bool:
    for column in (Opportunity.vehicle_id, QuotationItem.vehicle_id, SaleLine.vehicle_id):
        if db.query(column).filter(column == vehicle_id).first():
            return True
    return False


class Vehicles(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        data = payload.model_dump()
        data["make"] = data["make"].strip()
        data["model"] = data["model"].strip()
        data["price"] = round_money(data["price"])
        _ensure_unique_vehicle(db, data["make"], data["model"], data["year"])
        vehicle = Vehicle(**data)
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        logger.info("vehicle_created vehicle_id=%s", vehicle.id)
        return vehicle

    @staticmethod
    def get(db: Session, vehicle_id: str):
        vehicle = db.get(Vehicle, coerce_uuid(vehicle_id))
        if not vehicle:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return vehicle

    @staticmethod
    def list(
        db: Session,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        return (
            VehicleQuery(db)
            .order_by(order_by, order_dir)
            .then_by("make", "model")
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def by_make(db: Session, make: str, limit: int, offset: int):
        term = require_min_length(make, "Make")
        return (
            VehicleQuery(db)
            .make_contains(term)
            .order_by("model")
            .then_by("year")
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def search(db: Session, term: str, limit: int, offset: int):
        term = require_min_length(term, "Search term")
        return (
            VehicleQuery(db)
            .search(term)
            .order_by("make")
            .then_by("model")
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def makes(db: Session) -> list[str]:
        rows = db.query(Vehicle.make).distinct().order_by(Vehicle.make.asc()).all()
        return [row[0] for row in rows]

    @staticmethod
    def update(db: Session, vehicle_id: str, payload):
        vehicle = Vehicles.get(db, vehicle_id)
        data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
        if "make" in data:
            data["make"] = data["make"].strip()
        if "model" in data:
            data["model"] = data["model"].strip()
        if "price" in data:
            data["price"] = round_money(data["price"])
        if {"make", "model", "year"} & data.keys():
            _ensure_unique_vehicle(
                db,
                data.get("make", vehicle.make),
                data.get("model", vehicle.model),
                data.get("year", vehicle.year),
                exclude_id=vehicle.id,
            )
        for key, value in data.items():
            setattr(vehicle, key, value)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    @staticmethod
    def delete(db: Session, vehicle_id: str) -> None:
        vehicle = Vehicles.get(db, vehicle_id)
        if _is_referenced(db, vehicle.id):
            raise HTTPException(
                status_code=400,
                detail="Cannot delete vehicle referenced by opportunities, quotations or sales",
            )
        db.delete(vehicle)
        db.commit()
        logger.info("vehicle_deleted vehicle_id=%s", vehicle_id)


vehicles = Vehicles()
