from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.crm.documents import Field, as_number, as_text, create_document, delete_document, find_document, update_document
from app.crm.modules.categories.models import Category

logger = logging.getLogger(__name__)


CATEGORY_FIELDS = (
    Field("name", "name", as_text, required=True),
    Field("description", "description", as_text),
    Field("order", "order", as_number),
)


def page_window(pno: int, size: int) -> tuple[int, int]:
    """(skip, limit) for a 1-based page number."""
    if pno < 1:
        raise ValueError("page number must be >= 1")
    return (pno - 1) * size, size


def parse_page_number(raw: str | None) -> int | None:
    """None when absent/blank; ValueError when not a positive integer."""
    text = (raw or "").strip()
    if not text:
        return None
    pno = int(text)
    if pno < 1:
        raise ValueError(f"invalid page number: {raw!r}")
    return pno


def _ordered(s: Session):
    return s.query(Category).order_by(
        Category.order.desc().nullslast(),
        Category.created_at.asc(),
        Category.id.asc(),
    )


def list_categories(s: Session, *, pno: int | None = None, search: str | None = None, page_size: int = 3) -> list[Category]:
    """
    Exactly one mode applies: paged when `pno` is given, else name search when
    `search` is non-blank, else everything. All modes sort by `order` desc.
    """
    if pno is not None:
        skip, limit = page_window(pno, page_size)
        return _ordered(s).offset(skip).limit(limit).all()
    term = (search or "").strip()
    if term:
        return _ordered(s).filter(Category.name.icontains(term, autoescape=True)).all()
    return _ordered(s).all()


def get_category(s: Session, category_id: str | None) -> Category | None:
    return find_document(s, Category, category_id)


def create_category(s: Session, payload: Any) -> Category:
    c = create_document(s, Category, payload, CATEGORY_FIELDS)
    logger.info("category.create id=%s", c.id)
    return c


def update_category(s: Session, category_id: str | None, payload: Any) -> Category | None:
    c = update_document(s, Category, category_id, payload, CATEGORY_FIELDS)
    if c is not None:
        logger.info("category.update id=%s", c.id)
    return c


def delete_category(s: Session, category_id: str | None) -> dict[str, Any] | None:
    """Products pointing at the category keep their (now dangling) reference."""
    snapshot = delete_document(s, Category, category_id)
    if snapshot is not None:
        logger.info("category.delete id=%s", snapshot["_id"])
    return snapshot
