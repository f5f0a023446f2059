from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from app.crm.db import db_session
from app.crm.http import id_required, json_api, json_error, not_found, request_payload
from app.crm.modules.categories.service import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    parse_page_number,
    update_category,
)

bp = Blueprint("categories_api", __name__)


@bp.get("/category")
@json_api("Failed to fetch categories")
def categories_list():
    try:
        pno = parse_page_number(request.args.get("pno"))
    except ValueError:
        return json_error("Invalid page number", 400)
    s = db_session()
    categories = list_categories(
        s,
        pno=pno,
        search=request.args.get("s"),
        page_size=current_app.config["CATEGORY_PAGE_SIZE"],
    )
    return jsonify([c.to_dict() for c in categories])


@bp.post("/category")
@json_api("Failed to create category")
def category_create():
    s = db_session()
    c = create_category(s, request_payload())
    s.commit()
    return jsonify(c.to_dict())


@bp.put("/category")
@json_api("Failed to update category")
def category_update():
    s = db_session()
    payload = request_payload()
    category_id = payload.get("_id") if isinstance(payload, dict) else None
    c = update_category(s, category_id, payload)
    if c is None:
        return not_found("Category")
    s.commit()
    return jsonify(c.to_dict())


@bp.delete("/category")
@json_api("Failed to delete category")
def category_delete():
    category_id = (request.args.get("id") or "").strip()
    if not category_id:
        return id_required("Category")
    s = db_session()
    snapshot = delete_category(s, category_id)
    if snapshot is None:
        return not_found("Category")
    s.commit()
    return jsonify({"message": "Category deleted successfully", "category": snapshot})


@bp.get("/category/<category_id>")
@json_api("Failed to fetch category")
def category_detail(category_id: str):
    c = get_category(db_session(), category_id)
    if c is None:
        return not_found("Category")
    return jsonify(c.to_dict())


@bp.put("/category/<category_id>")
@json_api("Failed to update category")
def category_update_by_path(category_id: str):
    s = db_session()
    c = update_category(s, category_id, request_payload())
    if c is None:
        return not_found("Category")
    s.commit()
    return jsonify(c.to_dict())


@bp.delete("/category/<category_id>")
@json_api("Failed to delete category")
def category_delete_by_path(category_id: str):
    s = db_session()
    snapshot = delete_category(s, category_id)
    if snapshot is None:
        return not_found("Category")
    s.commit()
    return jsonify({"message": "Category deleted successfully", "category": snapshot})
