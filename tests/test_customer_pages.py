"""Tests for the customer browser pages."""
from datetime import date

import pytest

from app.crm import create_app
from app.crm.db import session_scope
from app.crm.modules.customers.service import create_customer
from app.crm.modules.customers.tiers import calculate_age


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("API_BASE_URL", "http://api.example.test/")
    for k in ("CATEGORY_PAGE_SIZE", "REDIRECT_DELAY_MS"):
        monkeypatch.delenv(k, raising=False)
    return create_app()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def ann_id(app):
    with session_scope(app) as s:
        c = create_customer(s, {"name": "Ann Lee", "dateOfBirth": "1990-05-01", "memberNumber": "2", "interests": "chess"})
        return c.id


VALID = {"name": "Bo Chan", "dateOfBirth": "1985-01-02", "memberNumber": "3", "interests": "golf"}


def test_list_empty(client):
    r = client.get("/customer")
    assert r.status_code == 200
    assert b"No customers yet." in r.data


def test_list_shows_tier_badge_and_api_base_url(client, ann_id):
    r = client.get("/customer")
    assert r.status_code == 200
    assert b"Ann Lee" in r.data
    assert b"tier-silver" in r.data
    assert b'"http://api.example.test"' in r.data
    assert f'data-customer-id="{ann_id}"'.encode() in r.data


def test_inline_create_redirects_to_list(client):
    r = client.post("/customer", data=VALID)
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/customer")

    r = client.get("/customer")
    assert b"Bo Chan" in r.data
    assert b"Customer added successfully!" in r.data


def test_inline_create_validation_reopens_form(client):
    r = client.post("/customer", data={**VALID, "name": ""})
    assert r.status_code == 400
    assert b"Name is required" in r.data
    assert b"<details class=\"inline-form\" open" in r.data


def test_detail_shows_tier_and_age(client, ann_id):
    r = client.get(f"/customer/{ann_id}")
    assert r.status_code == 200
    assert b"Silver Member" in r.data
    assert b"Standard membership with enhanced benefits" in r.data
    expected_age = calculate_age(date(1990, 5, 1))
    assert f"{expected_age} years old".encode() in r.data


def test_detail_unknown_customer(client):
    r = client.get("/customer/missing")
    assert r.status_code == 404
    assert b"Customer not found" in r.data


def test_add_form_renders_tiers(client):
    r = client.get("/customer/add")
    assert r.status_code == 200
    for label in (b"Bronze", b"Silver", b"Gold", b"Platinum"):
        assert label in r.data


def test_add_success_navigates_after_delay(client):
    r = client.post("/customer/add", data=VALID)
    assert r.status_code == 200
    assert b"Customer added successfully!" in r.data
    assert b'content="1.5;url=/customer"' in r.data
    assert b"submit-ok" in r.data

    customers = client.get("/api/customer").json
    assert [c["name"] for c in customers] == ["Bo Chan"]
    assert customers[0]["memberNumber"] == "3"


def test_add_rejects_future_birth_date(client):
    r = client.post("/customer/add", data={**VALID, "dateOfBirth": "2999-01-01"})
    assert r.status_code == 400
    assert b"Date of birth cannot be in the future" in r.data
    assert client.get("/api/customer").json == []


def test_add_store_failure_stays_on_form(client, ann_id):
    r = client.post("/customer/add", data={**VALID, "memberNumber": "2"})
    assert r.status_code == 500
    assert b"Error adding customer. Please try again." in r.data
    assert b"submit-failed" in r.data
    assert b'value="Bo Chan"' in r.data
    assert len(client.get("/api/customer").json) == 1


def test_edit_prefills_form(client, ann_id):
    r = client.get(f"/customer/edit/{ann_id}")
    assert r.status_code == 200
    assert b'value="Ann Lee"' in r.data
    assert b'value="1990-05-01"' in r.data


def test_edit_success_navigates_to_detail(client, ann_id):
    r = client.post(f"/customer/edit/{ann_id}", data={**VALID, "memberNumber": "2", "name": "Ann Lee-Smith"})
    assert r.status_code == 200
    assert b"Customer updated successfully!" in r.data
    assert f'content="1.5;url=/customer/{ann_id}"'.encode() in r.data
    assert client.get(f"/api/customer/{ann_id}").json["name"] == "Ann Lee-Smith"


def test_edit_allows_future_birth_date(client, ann_id):
    r = client.post(f"/customer/edit/{ann_id}", data={**VALID, "memberNumber": "2", "dateOfBirth": "2999-01-01"})
    assert r.status_code == 200
    assert client.get(f"/api/customer/{ann_id}").json["dateOfBirth"] == "2999-01-01"


def test_edit_validation_errors(client, ann_id):
    r = client.post(f"/customer/edit/{ann_id}", data={**VALID, "name": "A"})
    assert r.status_code == 400
    assert b"Name must be at least 2 characters" in r.data
    assert client.get(f"/api/customer/{ann_id}").json["name"] == "Ann Lee"


def test_edit_store_failure(client, ann_id):
    other = client.post("/api/customer", json={**VALID, "memberNumber": 4}).json
    r = client.post(f"/customer/edit/{other['_id']}", data={**VALID, "memberNumber": "2"})
    assert r.status_code == 500
    assert b"Error: Failed to update customer" in r.data


def test_edit_unknown_customer(client):
    assert client.get("/customer/edit/missing").status_code == 404
    assert client.post("/customer/edit/missing", data=VALID).status_code == 404


DISABLE_ON_SUBMIT = b"onsubmit=\"this.querySelector('button[type=submit]').disabled = true;\""


def test_forms_disable_submit_button_on_submit(client, ann_id):
    for path in ("/customer", "/customer/add", f"/customer/edit/{ann_id}"):
        r = client.get(path)
        assert r.status_code == 200
        assert DISABLE_ON_SUBMIT in r.data, path


def test_submit_button_stays_disabled_after_success(client, ann_id):
    r = client.get("/customer/add")
    assert b'<button type="submit" disabled>' not in r.data

    r = client.post("/customer/add", data=VALID)
    assert b'<button type="submit" disabled>Add customer</button>' in r.data

    r = client.post(f"/customer/edit/{ann_id}", data={**VALID, "memberNumber": "2"})
    assert b'<button type="submit" disabled>Update customer</button>' in r.data


def test_submit_button_reenabled_after_failure(client, ann_id):
    r = client.post("/customer/add", data={**VALID, "memberNumber": "2"})
    assert r.status_code == 500
    assert b'<button type="submit" disabled>' not in r.data


def test_list_delete_confirms_then_calls_api_and_reloads(client, ann_id):
    page = client.get("/customer").data.decode()
    confirm = page.index('confirm("Are you sure you want to delete this customer?")')
    call = page.index('fetch(`${API_BASE_URL}/api/customer/${id}`, { method: "DELETE" })')
    reload_ = page.index("window.location.reload()")
    assert confirm < call < reload_
    assert f'data-customer-id="{ann_id}" onclick="deleteCustomer(this)"' in page
