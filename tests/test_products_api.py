"""Tests for the /api/product resource."""
import pytest

from app.crm import create_app


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    for k in ("API_BASE_URL", "CATEGORY_PAGE_SIZE", "REDIRECT_DELAY_MS"):
        monkeypatch.delenv(k, raising=False)

    app = create_app()
    return app.test_client()


@pytest.fixture()
def category(client):
    r = client.post("/api/category", json={"name": "Tea", "order": 1})
    assert r.status_code == 200
    return r.json


def _create(client, **fields):
    r = client.post("/api/product", json=fields)
    assert r.status_code == 200, r.json
    return r.json


def test_create_defaults_in_stock_and_keeps_reference(client, category):
    p = _create(client, name="Green tea", price=4.5, category=category["_id"])
    assert p["_id"]
    assert p["inStock"] is True
    assert p["price"] == 4.5
    assert p["category"] == category["_id"]
    assert p["description"] is None


def test_list_expands_category(client, category):
    _create(client, name="Green tea", price=4.5, category=category["_id"])
    _create(client, name="Mug", price=12)

    r = client.get("/api/product")
    assert r.status_code == 200
    tea, mug = r.json
    assert tea["category"] == category
    assert mug["category"] is None
    assert mug["price"] == 12


def test_fetch_one_expands_category(client, category):
    p = _create(client, name="Black tea", price=3, category=category["_id"])
    r = client.get(f"/api/product/{p['_id']}")
    assert r.status_code == 200
    assert r.json["category"] == category
    assert client.get("/api/product/missing").status_code == 404


def test_deleting_category_leaves_dangling_reference(client, category):
    p = _create(client, name="Oolong", price=6, category=category["_id"])
    assert client.delete(f"/api/category?id={category['_id']}").status_code == 200

    r = client.get("/api/product")
    assert r.json[0]["_id"] == p["_id"]
    assert r.json[0]["category"] is None


def test_embedded_category_is_accepted_as_reference(client, category):
    p = _create(client, name="Chai", price=5, category=category)
    assert p["category"] == category["_id"]


def test_casts_string_values(client):
    p = _create(client, name="Sample", price="2.25", inStock="false")
    assert p["price"] == 2.25
    assert p["inStock"] is False


def test_missing_price_is_generic_failure(client):
    r = client.post("/api/product", json={"name": "Free?"})
    assert r.status_code == 500
    assert r.json == {"error": "Failed to create product"}


def test_bad_price_is_generic_failure(client):
    r = client.post("/api/product", json={"name": "Odd", "price": "cheap"})
    assert r.status_code == 500


def test_patch_overwrites_supplied_fields_only(client, category):
    p = _create(client, name="Sencha", price=7, description="Steamed", category=category["_id"])
    r = client.patch("/api/product", json={"_id": p["_id"], "inStock": False})
    assert r.status_code == 200
    assert r.json == {**p, "inStock": False}


def test_update_unknown_id_is_not_found(client):
    r = client.put("/api/product", json={"_id": "missing", "name": "X", "price": 1})
    assert r.status_code == 404
    assert r.json == {"error": "Product not found"}
    assert client.get("/api/product").json == []


def test_delete(client):
    p = _create(client, name="Kettle", price=30)
    assert client.delete("/api/product").status_code == 400
    assert client.delete("/api/product?id=missing").status_code == 404

    r = client.delete(f"/api/product?id={p['_id']}")
    assert r.status_code == 200
    assert r.json == {"message": "Product deleted successfully", "product": p}


@pytest.mark.parametrize("price", ["inf", "NaN", "1e999"])
def test_create_rejects_non_finite_price(client, price):
    r = client.post("/api/product", json={"name": "Gold tea", "price": price})
    assert r.status_code == 500
    assert r.json == {"error": "Failed to create product"}
    assert client.get("/api/product").json == []
