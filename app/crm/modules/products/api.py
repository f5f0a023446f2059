from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.crm.db import db_session
from app.crm.http import id_required, json_api, not_found, request_payload
from app.crm.modules.products.service import (
    create_product,
    delete_product,
    expand_products,
    get_product,
    list_products,
    update_product,
)

bp = Blueprint("products_api", __name__)


def _update(product_id: str | None, payload):
    s = db_session()
    p = update_product(s, product_id, payload)
    if p is None:
        return not_found("Product")
    s.commit()
    return jsonify(p.to_dict())


def _delete(product_id: str):
    s = db_session()
    snapshot = delete_product(s, product_id)
    if snapshot is None:
        return not_found("Product")
    s.commit()
    return jsonify({"message": "Product deleted successfully", "product": snapshot})


@bp.get("/product")
@json_api("Failed to fetch products")
def products_list():
    s = db_session()
    return jsonify(expand_products(s, list_products(s)))


@bp.post("/product")
@json_api("Failed to create product")
def product_create():
    s = db_session()
    p = create_product(s, request_payload())
    s.commit()
    return jsonify(p.to_dict())


@bp.route("/product", methods=["PUT", "PATCH"])
@json_api("Failed to update product")
def product_update():
    payload = request_payload()
    product_id = payload.get("_id") if isinstance(payload, dict) else None
    return _update(product_id, payload)


@bp.delete("/product")
@json_api("Failed to delete product")
def product_delete():
    product_id = (request.args.get("id") or "").strip()
    if not product_id:
        return id_required("Product")
    return _delete(product_id)


@bp.get("/product/<product_id>")
@json_api("Failed to fetch product")
def product_detail(product_id: str):
    s = db_session()
    p = get_product(s, product_id)
    if p is None:
        return not_found("Product")
    return jsonify(expand_products(s, [p])[0])


@bp.route("/product/<product_id>", methods=["PUT", "PATCH"])
@json_api("Failed to update product")
def product_update_by_path(product_id: str):
    return _update(product_id, request_payload())


@bp.delete("/product/<product_id>")
@json_api("Failed to delete product")
def product_delete_by_path(product_id: str):
    return _delete(product_id)
