"""Integration tests for the Merchandising API endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from merchandising.api import alert_router, pricing_router, product_router, report_router
from merchandising.product.product import Product
from protean.integrations.fastapi import register_exception_handlers
from protean.utils.globals import current_domain


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    app.include_router(pricing_router)
    app.include_router(alert_router)
    app.include_router(report_router)
    register_exception_handlers(app)
    return TestClient(app)


def _iso(moment):
    return moment.isoformat()


def _create(client, **overrides):
    payload = {"title": "Linen Shirt", "base_price": 59.9, "stock": 40}
    payload.update(overrides)
    response = client.post("/products", json=payload)
    assert response.status_code == 201
    return response.json()["product_id"]


def _add_variant(client, product_id, **overrides):
    payload = {"color_code": "#000080", "color_name": "Navy", "size": "M", "stock": 12}
    payload.update(overrides)
    response = client.post(f"/products/{product_id}/variants", json=payload)
    assert response.status_code == 201
    return response.json()["variant_id"]


class TestProductEndpoints:
    def test_create_product(self, client):
        product_id = _create(client)
        product = current_domain.repository_for(Product).get(product_id)
        assert product.slug == "linen-shirt"

    def test_get_product(self, client):
        product_id = _create(client)
        _add_variant(client, product_id)

        response = client.get(f"/products/{product_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["stock"] == 12
        assert data["stock_status"] == "in_stock"
        assert data["variants"][0]["color_name"] == "Navy"

    def test_unknown_product_returns_404(self, client):
        assert client.get("/products/does-not-exist").status_code == 404

    def test_invalid_discount_window_returns_400(self, client):
        now = datetime.now(UTC)
        response = client.post(
            "/products",
            json={
                "title": "Bad Sale",
                "base_price": 10.0,
                "discount_percentage": 20,
                "discount_start_time": _iso(now),
                "discount_end_time": _iso(now - timedelta(days=1)),
            },
        )
        assert response.status_code == 400

    def test_update_pricing(self, client):
        product_id = _create(client)
        now = datetime.now(UTC)
        response = client.put(
            f"/products/{product_id}/pricing",
            json={
                "base_price": 100.0,
                "discount_percentage": 40,
                "discount_start_time": _iso(now - timedelta(hours=1)),
                "discount_end_time": _iso(now + timedelta(hours=1)),
            },
        )
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["price"] == 60.0

    def test_update_stock(self, client):
        product_id = _create(client)
        response = client.put(f"/products/{product_id}/stock", json={"stock": 0})
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["stock_status"] == "out_of_stock"

    def test_negative_stock_returns_400(self, client):
        product_id = _create(client)
        assert client.put(f"/products/{product_id}/stock", json={"stock": -4}).status_code == 400

    def test_own_stock_with_variants_returns_400(self, client):
        product_id = _create(client)
        _add_variant(client, product_id)
        assert client.put(f"/products/{product_id}/stock", json={"stock": 5}).status_code == 400

    def test_set_threshold(self, client):
        product_id = _create(client)
        response = client.put(f"/products/{product_id}/low-stock-threshold", json={"threshold": 50})
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["stock_status"] == "low_stock"

    def test_zero_threshold_returns_400(self, client):
        product_id = _create(client)
        assert client.put(f"/products/{product_id}/low-stock-threshold", json={"threshold": 0}).status_code == 400

    def test_set_pre_order(self, client):
        product_id = _create(client, stock=0)
        response = client.put(f"/products/{product_id}/pre-order", json={"pre_order": True})
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["stock_status"] == "pre_order"


class TestVariantEndpoints:
    def test_variant_pricing_and_stock(self, client):
        product_id = _create(client)
        variant_id = _add_variant(client, product_id)

        response = client.put(
            f"/products/{product_id}/variants/{variant_id}/pricing",
            json={"base_price": 75.0},
        )
        assert response.status_code == 200

        response = client.put(f"/products/{product_id}/variants/{variant_id}/stock", json={"stock": 2})
        assert response.status_code == 200

        variant = client.get(f"/products/{product_id}").json()["variants"][0]
        assert variant["price"] == 75.0
        assert variant["stock_status"] == "low_stock"

    def test_remove_variant(self, client):
        product_id = _create(client)
        variant_id = _add_variant(client, product_id)

        response = client.delete(f"/products/{product_id}/variants/{variant_id}")

        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["variants"] == []

    def test_unknown_variant_returns_400(self, client):
        product_id = _create(client)
        response = client.put(f"/products/{product_id}/variants/missing/stock", json={"stock": 2})
        assert response.status_code == 400


class TestPriceQuote:
    def test_quote_product(self, client):
        now = datetime.now(UTC)
        product_id = _create(
            client,
            base_price=80.0,
            discount_percentage=25,
            discount_start_time=_iso(now - timedelta(hours=1)),
            discount_end_time=_iso(now + timedelta(hours=1)),
        )

        data = client.get(f"/products/{product_id}/price").json()

        assert data["effective_price"] == 60.0
        assert data["discount_active"] is True
        assert data["applied_discount_percentage"] == 25.0

    def test_quote_fixed_discount(self, client):
        now = datetime.now(UTC)
        product_id = _create(
            client,
            base_price=80.0,
            discount_type="fixed",
            discount_amount=12.5,
            discount_start_time=_iso(now - timedelta(hours=1)),
            discount_end_time=_iso(now + timedelta(hours=1)),
        )

        data = client.get(f"/products/{product_id}/price").json()

        assert data["effective_price"] == 67.5
        assert data["discount_type"] == "fixed"
        assert data["applied_discount_amount"] == 12.5
        assert data["applied_discount_percentage"] == 0.0

        product = client.get(f"/products/{product_id}").json()
        assert product["discount_type"] == "fixed"
        assert product["discount_amount"] == 12.5
        assert product["price"] == 67.5

    def test_unknown_discount_type_returns_400(self, client):
        response = client.post(
            "/products",
            json={"title": "Linen Shirt", "base_price": 59.9, "discount_type": "bogo", "discount_amount": 5},
        )
        assert response.status_code == 400

    def test_quote_variant_with_explicit_zero(self, client):
        now = datetime.now(UTC)
        product_id = _create(
            client,
            base_price=80.0,
            discount_percentage=25,
            discount_start_time=_iso(now - timedelta(hours=1)),
            discount_end_time=_iso(now + timedelta(hours=1)),
        )
        variant_id = _add_variant(client, product_id, discount_percentage=0)

        data = client.get(f"/products/{product_id}/price", params={"variant_id": variant_id}).json()

        assert data["variant_id"] == variant_id
        assert data["effective_price"] == 80.0
        assert data["discount_active"] is False


class TestPricingSweepEndpoint:
    def test_reevaluate(self, client):
        start = datetime.now(UTC) + timedelta(days=1)
        product_id = _create(
            client,
            base_price=50.0,
            discount_percentage=10,
            discount_start_time=_iso(start),
            discount_end_time=_iso(start + timedelta(days=1)),
        )

        response = client.post("/pricing/reevaluate", json={"as_of": _iso(start)})

        assert response.status_code == 200
        assert response.json() == {"evaluated": 1, "changed": 1, "failed": 0}
        assert client.get(f"/products/{product_id}").json()["price"] == 45.0


class TestStockAlertEndpoints:
    def test_list_and_mark_read(self, client):
        _create(client, title="Empty One", stock=0)
        _create(client, title="Empty Two", stock=0)

        data = client.get("/stock-alerts").json()
        assert data["total"] == 2
        assert data["unread"] == 2
        assert {a["alert_type"] for a in data["alerts"]} == {"out_of_stock"}

        alert_id = data["alerts"][0]["alert_id"]
        assert client.put(f"/stock-alerts/{alert_id}/read").status_code == 200

        unread = client.get("/stock-alerts", params={"unread_only": True}).json()
        assert unread["total"] == 1

    def test_read_all(self, client):
        _create(client, title="Empty One", stock=0)
        _create(client, title="Empty Two", stock=0)

        response = client.put("/stock-alerts/read-all")

        assert response.status_code == 200
        assert response.json()["marked"] == 2
        assert client.get("/stock-alerts").json()["unread"] == 0

    def test_unknown_alert_returns_404(self, client):
        assert client.put("/stock-alerts/missing/read").status_code == 404


class TestStockReportEndpoint:
    def test_report(self, client):
        _create(client, title="Plenty", stock=90)
        _create(client, title="Few", stock=3)

        data = client.get("/stock-reports").json()

        assert [p["title"] for p in data["products"]] == ["Few", "Plenty"]
        assert data["summary"]["low_stock"] == 1
        assert data["summary"]["in_stock"] == 1
        assert data["summary"]["total"] == 2

    def test_low_stock_only(self, client):
        _create(client, title="Plenty", stock=90)
        _create(client, title="Few", stock=3)

        data = client.get("/stock-reports", params={"low_stock_only": True}).json()

        assert [p["title"] for p in data["products"]] == ["Few"]

    def test_low_stock_only_excludes_out_of_stock(self, client):
        _create(client, title="Few", stock=3)
        _create(client, title="Gone", stock=0)

        data = client.get("/stock-reports", params={"low_stock_only": True}).json()

        assert [p["title"] for p in data["products"]] == ["Few"]
        assert data["summary"]["out_of_stock"] == 1

    def test_paging(self, client):
        for title, stock in (("Plenty", 90), ("Few", 3), ("Some", 40)):
            _create(client, title=title, stock=stock)

        data = client.get("/stock-reports", params={"page": 2, "page_size": 2}).json()

        assert [p["title"] for p in data["products"]] == ["Plenty"]
        assert data["total"] == 3
        assert data["page"] == 2
        assert data["pages"] == 2

    def test_unknown_status_returns_400(self, client):
        assert client.get("/stock-reports", params={"status": "sold_out"}).status_code == 400
