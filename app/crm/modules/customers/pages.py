from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from app.crm.db import db_session
from app.crm.modules.customers.models import Customer
from app.crm.modules.customers.service import (
    ValidationError,
    create_customer,
    form_to_payload,
    get_customer,
    list_customers,
    update_customer,
    validate_customer_form,
)
from app.crm.modules.customers.tiers import MEMBER_TIERS, calculate_age, tier_info

logger = logging.getLogger(__name__)

bp = Blueprint("customer_pages", __name__)

FORM_FIELDS = ("name", "dateOfBirth", "memberNumber", "interests")


@dataclass(frozen=True)
class SubmitResult:
    ok: bool
    message: str


def _form_values() -> dict[str, str]:
    return {k: (request.form.get(k) or "") for k in FORM_FIELDS}


def _error_map(errs: list[ValidationError]) -> dict[str, str]:
    return {e.field: e.message for e in errs}


def _customer_form(c: Customer) -> dict[str, str]:
    return {
        "name": c.name or "",
        "dateOfBirth": c.date_of_birth.isoformat() if c.date_of_birth else "",
        "memberNumber": c.member_number or "",
        "interests": c.interests or "",
    }


def _render_list(*, form: dict[str, Any] | None = None, errors: dict[str, str] | None = None, show_form: bool = False):
    customers = list_customers(db_session())
    return render_template(
        "customers/list.html",
        rows=[(c, tier_info(c.member_number)) for c in customers],
        tiers=MEMBER_TIERS,
        form=form or {},
        errors=errors or {},
        show_form=show_form,
    )


def _not_found_page():
    return render_template("errors/404.html", message="Customer not found"), 404


@bp.get("/customer")
def customers_list():
    return _render_list()


@bp.post("/customer")
def customers_list_create():
    """Inline create form on the list page."""
    form = _form_values()
    errs = validate_customer_form(form)
    if errs:
        return _render_list(form=form, errors=_error_map(errs), show_form=True), 400
    s = db_session()
    try:
        create_customer(s, form_to_payload(form))
        s.commit()
    except Exception:
        s.rollback()
        logger.exception("Inline customer create failed")
        flash("Error adding customer. Please try again.", "danger")
        return _render_list(form=form, show_form=True), 500
    flash("Customer added successfully!", "success")
    return redirect(url_for("customer_pages.customers_list"))


@bp.get("/customer/add")
def customer_add_get():
    return render_template("customers/add.html", form={}, errors={}, tiers=MEMBER_TIERS, result=None)


@bp.post("/customer/add")
def customer_add_post():
    form = _form_values()
    errs = validate_customer_form(form)
    if errs:
        return render_template(
            "customers/add.html", form=form, errors=_error_map(errs), tiers=MEMBER_TIERS, result=None
        ), 400
    s = db_session()
    try:
        create_customer(s, form_to_payload(form))
        s.commit()
    except Exception:
        s.rollback()
        logger.exception("Customer add failed")
        result = SubmitResult(False, "Error adding customer. Please try again.")
        return render_template("customers/add.html", form=form, errors={}, tiers=MEMBER_TIERS, result=result), 500
    return render_template(
        "customers/add.html",
        form={},
        errors={},
        tiers=MEMBER_TIERS,
        result=SubmitResult(True, "Customer added successfully!"),
        redirect_url=url_for("customer_pages.customers_list"),
        redirect_delay_ms=current_app.config["REDIRECT_DELAY_MS"],
    )


@bp.get("/customer/<customer_id>")
def customer_detail(customer_id: str):
    c = get_customer(db_session(), customer_id)
    if c is None:
        return _not_found_page()
    return render_template(
        "customers/detail.html",
        customer=c,
        tier=tier_info(c.member_number),
        age=calculate_age(c.date_of_birth),
    )


@bp.get("/customer/edit/<customer_id>")
def customer_edit_get(customer_id: str):
    c = get_customer(db_session(), customer_id)
    if c is None:
        return _not_found_page()
    return render_template(
        "customers/edit.html",
        customer=c,
        form=_customer_form(c),
        errors={},
        tiers=MEMBER_TIERS,
        tier=tier_info(c.member_number),
        result=None,
    )


@bp.post("/customer/edit/<customer_id>")
def customer_edit_post(customer_id: str):
    s = db_session()
    c = get_customer(s, customer_id)
    if c is None:
        return _not_found_page()
    form = _form_values()
    page = {"customer": c, "tiers": MEMBER_TIERS, "tier": tier_info(c.member_number)}

    # The edit form does not reject future birth dates.
    errs = validate_customer_form(form, allow_future_birth=True)
    if errs:
        return render_template("customers/edit.html", form=form, errors=_error_map(errs), result=None, **page), 400
    try:
        update_customer(s, customer_id, form_to_payload(form))
        s.commit()
    except Exception:
        s.rollback()
        logger.exception("Customer edit failed id=%s", customer_id)
        result = SubmitResult(False, "Error: Failed to update customer")
        return render_template("customers/edit.html", form=form, errors={}, result=result, **page), 500
    return render_template(
        "customers/edit.html",
        form=form,
        errors={},
        result=SubmitResult(True, "Customer updated successfully!"),
        redirect_url=url_for("customer_pages.customer_detail", customer_id=customer_id),
        redirect_delay_ms=current_app.config["REDIRECT_DELAY_MS"],
        **page,
    )
