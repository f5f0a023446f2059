from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.crm.db import db_session
from app.crm.http import id_required, json_api, not_found, request_payload
from app.crm.modules.customers.service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

bp = Blueprint("customers_api", __name__)


def _deleted(snapshot: dict):
    return jsonify({"message": "Customer deleted successfully", "customer": snapshot})


def _update(customer_id: str | None, payload):
    s = db_session()
    c = update_customer(s, customer_id, payload)
    if c is None:
        return not_found("Customer")
    s.commit()
    return jsonify(c.to_dict())


@bp.get("/customer")
@json_api("Failed to fetch customers")
def customers_list():
    return jsonify([c.to_dict() for c in list_customers(db_session())])


@bp.post("/customer")
@json_api("Failed to create customer")
def customer_create():
    s = db_session()
    c = create_customer(s, request_payload())
    s.commit()
    return jsonify(c.to_dict())


@bp.route("/customer", methods=["PUT", "PATCH"])
@json_api("Failed to update customer")
def customer_update():
    payload = request_payload()
    customer_id = payload.get("_id") if isinstance(payload, dict) else None
    return _update(customer_id, payload)


@bp.delete("/customer")
@json_api("Failed to delete customer")
def customer_delete():
    customer_id = (request.args.get("id") or "").strip()
    if not customer_id:
        return id_required("Customer")
    s = db_session()
    snapshot = delete_customer(s, customer_id)
    if snapshot is None:
        return not_found("Customer")
    s.commit()
    return _deleted(snapshot)


@bp.get("/customer/<customer_id>")
@json_api("Failed to fetch customer")
def customer_detail(customer_id: str):
    c = get_customer(db_session(), customer_id)
    if c is None:
        return not_found("Customer")
    return jsonify(c.to_dict())


@bp.route("/customer/<customer_id>", methods=["PUT", "PATCH"])
@json_api("Failed to update customer")
def customer_update_by_path(customer_id: str):
    return _update(customer_id, request_payload())


@bp.delete("/customer/<customer_id>")
@json_api("Failed to delete customer")
def customer_delete_by_path(customer_id: str):
    s = db_session()
    snapshot = delete_customer(s, customer_id)
    if snapshot is None:
        return not_found("Customer")
    s.commit()
    return _deleted(snapshot)
