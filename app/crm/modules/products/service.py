from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.crm.documents import (
    Field,
    as_bool,
    as_number,
    as_ref,
    as_text,
    create_document,
    delete_document,
    find_document,
    update_document,
)
from app.crm.modules.categories.models import Category
from app.crm.modules.products.models import Product

logger = logging.getLogger(__name__)


PRODUCT_FIELDS = (
    Field("name", "name", as_text, required=True),
    Field("description", "description", as_text),
    Field("price", "price", as_number, required=True),
    Field("category", "category_id", as_ref),
    Field("inStock", "in_stock", as_bool, default=True),
)


def expand_products(s: Session, products: list[Product]) -> list[dict[str, Any]]:
    """Serialize products with `category` replaced by the referenced Category (None if dangling)."""
    ref_ids = {p.category_id for p in products if p.category_id}
    categories: dict[str, dict[str, Any]] = {}
    if ref_ids:
        for c in s.query(Category).filter(Category.id.in_(ref_ids)).all():
            categories[c.id] = c.to_dict()
    return [p.to_dict(categories.get(p.category_id or ""), expand=True) for p in products]


def list_products(s: Session) -> list[Product]:
    return s.query(Product).order_by(Product.created_at.asc(), Product.id.asc()).all()


def get_product(s: Session, product_id: str | None) -> Product | None:
    return find_document(s, Product, product_id)


def create_product(s: Session, payload: Any) -> Product:
    p = create_document(s, Product, payload, PRODUCT_FIELDS)
    logger.info("product.create id=%s category=%s", p.id, p.category_id)
    return p


def update_product(s: Session, product_id: str | None, payload: Any) -> Product | None:
    p = update_document(s, Product, product_id, payload, PRODUCT_FIELDS)
    if p is not None:
        logger.info("product.update id=%s", p.id)
    return p


def delete_product(s: Session, product_id: str | None) -> dict[str, Any] | None:
    snapshot = delete_document(s, Product, product_id)
    if snapshot is not None:
        logger.info("product.delete id=%s", snapshot["_id"])
    return snapshot
