from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import Date, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base, DocumentMixin


class Customer(DocumentMixin, Base):
    __tablename__ = "customer"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    # Tier 1-4 in the UI, stored as text; uniqueness is enforced by the store.
    member_number: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    interests: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "dateOfBirth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "memberNumber": self.member_number,
            "interests": self.interests,
        }
