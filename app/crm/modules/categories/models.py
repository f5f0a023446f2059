from __future__ import annotations

from typing import Any

from sqlalchemy import Float, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base, DocumentMixin, plain_number


class Category(DocumentMixin, Base):
    __tablename__ = "category"
    __table_args__ = (
        Index("idx_category_order", "order"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[float | None] = mapped_column(Float, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "description": self.description,
            "order": plain_number(self.order),
        }