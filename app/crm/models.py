from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def plain_number(value: float | None) -> float | int | None:
    """Whole floats come back from the store as ints (12.0 -> 12)."""
    if value is not None and float(value).is_integer():
        return int(value)
    return value


class DocumentMixin:
    """
    Columns shared by every collection. `id` is generated by the store layer
    and never changes; `created_at` is bookkeeping and is not serialized.
    """

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.crm.modules.categories.models import Category  # noqa: E402,F401
from app.crm.modules.customers.models import Customer  # noqa: E402,F401
from app.crm.modules.products.models import Product  # noqa: E402,F401
