from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from app.crm.documents import (
    Field,
    SchemaError,
    as_date,
    as_text,
    create_document,
    delete_document,
    find_document,
    update_document,
)
from app.crm.modules.customers.models import Customer
from app.crm.modules.customers.tiers import parse_tier

logger = logging.getLogger(__name__)


def as_member_number(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool) or isinstance(value, (dict, list)):
        raise SchemaError(f"Expected a member number, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def as_interests(value: Any) -> str | None:
    """Interests are free text; a list of strings is joined into one."""
    if isinstance(value, list):
        return ", ".join(str(v).strip() for v in value if str(v).strip()) or None
    return as_text(value)


CUSTOMER_FIELDS = (
    Field("name", "name", as_text, required=True),
    Field("dateOfBirth", "date_of_birth", as_date, required=True),
    Field("memberNumber", "member_number", as_member_number, required=True),
    Field("interests", "interests", as_interests),
)


def list_customers(s: Session) -> list[Customer]:
    return s.query(Customer).order_by(Customer.created_at.asc(), Customer.id.asc()).all()


def get_customer(s: Session, customer_id: str | None) -> Customer | None:
    return find_document(s, Customer, customer_id)


def create_customer(s: Session, payload: Any) -> Customer:
    c = create_document(s, Customer, payload, CUSTOMER_FIELDS)
    logger.info("customer.create id=%s", c.id)
    return c


def update_customer(s: Session, customer_id: str | None, payload: Any) -> Customer | None:
    """PUT and PATCH share this: supplied fields overwrite, the id never changes."""
    c = update_document(s, Customer, customer_id, payload, CUSTOMER_FIELDS)
    if c is not None:
        logger.info("customer.update id=%s", c.id)
    return c


def delete_customer(s: Session, customer_id: str | None) -> dict[str, Any] | None:
    snapshot = delete_document(s, Customer, customer_id)
    if snapshot is not None:
        logger.info("customer.delete id=%s", snapshot["_id"])
    return snapshot


# ============================================================================
# Form validation (browser pages)
# ============================================================================

@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str


def validate_customer_form(
    form: dict[str, Any],
    *,
    allow_future_birth: bool = False,
    today: date | None = None,
) -> list[ValidationError]:
    """
    Rules for the add/edit forms. The edit form passes allow_future_birth=True;
    the API itself applies none of these.
    """
    errs: list[ValidationError] = []

    name = (form.get("name") or "").strip()
    if not name:
        errs.append(ValidationError("name", "Name is required"))
    elif len(name) < 2:
        errs.append(ValidationError("name", "Name must be at least 2 characters"))

    raw_dob = (form.get("dateOfBirth") or "").strip()
    if not raw_dob:
        errs.append(ValidationError("dateOfBirth", "Date of birth is required"))
    else:
        try:
            dob = date.fromisoformat(raw_dob)
        except ValueError:
            errs.append(ValidationError("dateOfBirth", "Date of birth must be a valid date"))
        else:
            if not allow_future_birth and dob > (today or date.today()):
                errs.append(ValidationError("dateOfBirth", "Date of birth cannot be in the future"))

    raw_tier = (form.get("memberNumber") or "").strip()
    if not raw_tier:
        errs.append(ValidationError("memberNumber", "Please select a member tier"))
    elif parse_tier(raw_tier) is None:
        errs.append(ValidationError("memberNumber", "Member tier must be one of 1, 2, 3 or 4"))

    return errs


def form_to_payload(form: dict[str, Any]) -> dict[str, Any]:
    """Normalize submitted form values into an API payload."""
    return {
        "name": (form.get("name") or "").strip(),
        "dateOfBirth": (form.get("dateOfBirth") or "").strip(),
        "memberNumber": parse_tier(form.get("memberNumber")),
        "interests": (form.get("interests") or "").strip(),
    }
