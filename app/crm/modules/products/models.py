from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base, DocumentMixin, plain_number


class Product(DocumentMixin, Base):
    __tablename__ = "product"
    __table_args__ = (
        Index("idx_product_category_id", "category_id"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    # Plain id, no foreign key: deleting a category leaves the reference dangling.
    category_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_dict(self, category: dict[str, Any] | None = None, *, expand: bool = False) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "description": self.description,
            "price": plain_number(self.price),
            "category": category if expand else self.category_id,
            "inStock": self.in_stock,
        }
