from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from autosales.logging import get_logger
from autosales.models.opportunity import Opportunity
from autosales.models.quotation import Quotation, QuotationItem
from autosales.models.vehicle import Vehicle
from autosales.queries.opportunities import QuotationQuery
from autosales.services.common import coerce_uuid, round_money
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)

_QUOTATION_LOAD = (
    selectinload(Quotation.items).selectinload(QuotationItem.vehicle),
    selectinload(Quotation.invoice),
)


def calculate_item_total(quantity: int, unit_price, discount) -> Decimal:
    gross = Decimal(unit_price or 0) * int(quantity or 0)
    discount = Decimal(discount or 0)
    if discount > gross:
        raise HTTPException(status_code=400, detail="Discount cannot exceed the item amount")
    return round_money(gross - discount)


def _recalculate_quotation_total(db: Session, quotation: Quotation) -> None:
    db.flush()
    subtotal = (
        db.query(func.coalesce(func.sum(QuotationItem.total), 0))
        .filter(QuotationItem.quotation_id == quotation.id)
        .scalar()
    )
    quotation.total = round_money(subtotal)


def _ensure_single_active(db: Session, opportunity_id, exclude_id=None) -> None:
    other_active = (
        QuotationQuery(db)
        .by_opportunity(opportunity_id)
        .active_only()
        .excluding(exclude_id)
        .exists()
    )
    if other_active:
        raise HTTPException(
            status_code=400,
            detail="The opportunity already has an active quotation",
        )


def _ensure_editable(quotation: Quotation) -> None:
    if not quotation.is_active:
        raise HTTPException(
            status_code=400,
            detail="Items of an inactive quotation cannot be modified",
        )


class Quotations(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        opportunity = db.get(Opportunity, payload.opportunity_id)
        if not opportunity:
            raise HTTPException(status_code=400, detail="Opportunity not found")
        if payload.is_active:
            _ensure_single_active(db, opportunity.id)
        quotation = Quotation(
            opportunity_id=opportunity.id,
            is_active=payload.is_active,
            total=Decimal("0.00"),
        )
        db.add(quotation)
        db.commit()
        db.refresh(quotation)
        logger.info(
            "quotation_created quotation_id=%s opportunity_id=%s",
            quotation.id,
            opportunity.id,
        )
        return quotation

    @staticmethod
    def get(db: Session, quotation_id: str):
        quotation = db.get(Quotation, coerce_uuid(quotation_id), options=list(_QUOTATION_LOAD))
        if not quotation:
            raise HTTPException(status_code=404, detail="Quotation not found")
        return quotation

    @staticmethod
    def list(
        db: Session,
        opportunity_id: str | None,
        is_active: bool | None,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        return (
            QuotationQuery(db)
            .options(*_QUOTATION_LOAD)
            .by_opportunity(opportunity_id)
            .active_only(is_active)
            .order_by(order_by, order_dir)
            .paginate(limit, offset)
            .all()
        )

    @staticmethod
    def set_status(db: Session, quotation_id: str, is_active: bool):
        quotation = Quotations.get(db, quotation_id)
        if is_active and not quotation.is_active:
            _ensure_single_active(db, quotation.opportunity_id, exclude_id=quotation.id)
        quotation.is_active = is_active
        db.commit()
        db.refresh(quotation)
        logger.info("quotation_status quotation_id=%s is_active=%s", quotation.id, is_active)
        return quotation

    @staticmethod
    def delete(db: Session, quotation_id: str) -> None:
        quotation = Quotations.get(db, quotation_id)
        if quotation.invoice is not None:
            raise HTTPException(status_code=400, detail="Cannot delete an invoiced quotation")
        db.delete(quotation)
        db.commit()
        logger.info("quotation_deleted quotation_id=%s", quotation_id)


class QuotationItems(ListResponseMixin):
    @staticmethod
    def create(db: Session, payload):
        quotation = db.get(Quotation, payload.quotation_id)
        if not quotation:
            raise HTTPException(status_code=400, detail="Quotation not found")
        if not db.get(Vehicle, payload.vehicle_id):
            raise HTTPException(status_code=400, detail="Vehicle not found")
        _ensure_editable(quotation)
        data = payload.model_dump()
        data["unit_price"] = round_money(data["unit_price"])
        data["discount"] = round_money(data["discount"])
        data["total"] = calculate_item_total(data["quantity"], data["unit_price"], data["discount"])
        item = QuotationItem(**data)
        db.add(item)
        _recalculate_quotation_total(db, quotation)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def get(db: Session, item_id: str):
        item = db.get(QuotationItem, coerce_uuid(item_id))
        if not item:
            raise HTTPException(status_code=404, detail="Quotation item not found")
        return item

    @staticmethod
    def list(
        db: Session,
        quotation_id: str,
        limit: int,
        offset: int,
    ):
        quotation = db.get(Quotation, coerce_uuid(quotation_id, "quotation_id"))
        if not quotation:
            raise HTTPException(status_code=404, detail="Quotation not found")
        return (
            db.query(QuotationItem)
            .options(selectinload(QuotationItem.vehicle))
            .filter(QuotationItem.quotation_id == quotation.id)
            .order_by(QuotationItem.created_at.asc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    @staticmethod
    def update(db: Session, item_id: str, payload):
        item = QuotationItems.get(db, item_id)
        _ensure_editable(item.quotation)
        data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}
        if "vehicle_id" in data and not db.get(Vehicle, data["vehicle_id"]):
            raise HTTPException(status_code=400, detail="Vehicle not found")
        for field in ("unit_price", "discount"):
            if field in data:
                data[field] = round_money(data[field])
        total = calculate_item_total(
            data.get("quantity", item.quantity),
            data.get("unit_price", item.unit_price),
            data.get("discount", item.discount),
        )
        for key, value in data.items():
            setattr(item, key, value)
        item.total = total
        _recalculate_quotation_total(db, item.quotation)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete(db: Session, item_id: str) -> None:
        item = QuotationItems.get(db, item_id)
        quotation = item.quotation
        _ensure_editable(quotation)
        db.delete(item)
        _recalculate_quotation_total(db, quotation)
        db.commit()


quotations = Quotations()
quotation_items = QuotationItems()
