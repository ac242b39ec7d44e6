from fastapi import HTTPException
from sqlalchemy.orm import Session

from autosales.logging import get_logger
from autosales.models.product import Product
from autosales.services.common import apply_ordering, apply_pagination, round_money
from autosales.services.response import ListResponseMixin

logger = get_logger(__name__)


class Products(ListResponseMixin):
    """Catalogue products, addressed by their unique name."""

    @staticmethod
    def create(db: Session, payload):
        data = payload.model_dump()
        data["name"] = data["name"].strip()
        if db.query(Product.id).filter(Product.name == data["name"]).first():
            raise HTTPException(status_code=409, detail="A product with this name already exists")
        data["price"] = round_money(data["price"])
        product = Product(**data)
        db.add(product)
        db.commit()
        db.refresh(product)
        logger.info("product_created product_id=%s name=%s", product.id, product.name)
        return product

    @staticmethod
    def get(db: Session, name: str):
        product = db.query(Product).filter(Product.name == name).first()
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    @staticmethod
    def list(
        db: Session,
        order_by: str,
        order_dir: str,
        limit: int,
        offset: int,
    ):
        query = apply_ordering(
            db.query(Product),
            order_by,
            order_dir,
            {"name": Product.name, "price": Product.price, "created_at": Product.created_at},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def replace(db: Session, name: str, payload):
        if payload.name.strip() != name:
            raise HTTPException(status_code=400, detail="Product name does not match the request path")
        product = Products.get(db, name)
        product.price = round_money(payload.price)
        product.quantity = payload.quantity
        product.description = payload.description
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def delete(db: Session, name: str) -> None:
        product = Products.get(db, name)
        db.delete(product)
        db.commit()
        logger.info("product_deleted name=%s", name)


products = Products()
