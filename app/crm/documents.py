"""
Single-document CRUD shared by the category, customer and product resources.

Each resource describes its writable fields with a tuple of `Field` entries.
Payload keys are the camelCase names used on the wire; anything not in the
table (including `_id`) is ignored, the way a strict document schema drops
unknown paths.
"""

from __future__ import annotations

import math
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.crm.models import Base


class SchemaError(ValueError):
    """A payload value could not be cast, or a required value is missing."""


_MISSING = object()


@dataclass(frozen=True)
class Field:
    key: str
    attr: str
    cast: Callable[[Any], Any]
    required: bool = False
    default: Any = None


def new_id() -> str:
    return uuid.uuid4().hex


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise SchemaError(f"Expected text, got {type(value).__name__}")
    return str(value)


def as_number(value: Any) -> float | int | None:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise SchemaError("Expected a number, got a boolean")
    if isinstance(value, (int, float)):
        result = value
    else:
        try:
            text = str(value).strip()
            result = int(text) if text.lstrip("-").isdigit() else float(text)
        except (TypeError, ValueError) as e:
            raise SchemaError(f"Expected a number, got {value!r}") from e
    # NaN and infinities have no JSON form
    if isinstance(result, float) and not math.isfinite(result):
        raise SchemaError(f"Expected a finite number, got {value!r}")
    return result


_TRUE = {"true", "1", "yes"}
_FALSE = {"false", "0", "no"}


def as_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise SchemaError(f"Expected a boolean, got {value!r}")


def as_date(value: Any) -> date | None:
    """Accept `YYYY-MM-DD` or an ISO datetime (trailing `Z` allowed)."""
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    except ValueError as e:
        raise SchemaError(f"Expected a date, got {value!r}") from e


def as_ref(value: Any) -> str | None:
    """A reference to another document: its id, or an embedded copy carrying `_id`."""
    if isinstance(value, dict):
        value = value.get("_id")
    if _is_blank(value):
        return None
    return str(value).strip()


def find_document(s: Session, model: type[Base], record_id: str | None):
    if _is_blank(record_id):
        return None
    return s.get(model, str(record_id))


def _apply(obj: Base, payload: dict[str, Any], fields: Iterable[Field]) -> None:
    for f in fields:
        raw = payload.get(f.key, _MISSING)
        if raw is _MISSING:
            continue
        setattr(obj, f.attr, f.cast(raw))


def _require_mapping(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise SchemaError("Request body must be a JSON object")
    return payload


def create_document(s: Session, model: type[Base], payload: Any, fields: tuple[Field, ...]):
    payload = _require_mapping(payload)
    obj = model(id=new_id())
    for f in fields:
        if f.default is not None:
            setattr(obj, f.attr, f.default)
    _apply(obj, payload, fields)
    missing = [f.key for f in fields if f.required and _is_blank(getattr(obj, f.attr))]
    if missing:
        raise SchemaError(f"Missing required field(s): {', '.join(missing)}")
    s.add(obj)
    s.flush()
    return obj


def update_document(s: Session, model: type[Base], record_id: str | None, payload: Any, fields: tuple[Field, ...]):
    """
    Shallow overwrite of the supplied fields. Returns None when the id does not
    exist; nothing is created in that case.
    """
    payload = _require_mapping(payload)
    obj = find_document(s, model, record_id)
    if obj is None:
        return None
    _apply(obj, payload, fields)
    s.flush()
    return obj


def delete_document(s: Session, model: type[Base], record_id: str | None) -> dict[str, Any] | None:
    obj = find_document(s, model, record_id)
    if obj is None:
        return None
    snapshot = obj.to_dict()
    s.delete(obj)
    s.flush()
    return snapshot
