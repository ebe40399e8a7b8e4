import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import (
    admin_router,
    cart_router,
    checkout_router,
    payment_router,
    register_error_handlers,
)


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(payment_router)
    app.include_router(admin_router)
    return TestClient(app)


@pytest.fixture()
def api_variant(client):
    """Factory creating a product and variant through the admin API."""
    counter = {"n": 0}

    def _make(price=50000, stock=5):
        counter["n"] += 1
        response = client.post("/admin/products", json={"name": f"API Product {counter['n']}", "status": "Active"})
        assert response.status_code == 201
        product_id = response.json()["product_id"]

        response = client.post(
            f"/admin/products/{product_id}/variants",
            json={"sku": f"API-{counter['n']:03d}", "title": "Default", "price": price, "initial_stock": stock},
        )
        assert response.status_code == 201
        return response.json()["variant_id"]

    return _make


@pytest.fixture()
def checkout_body():
    def _body(cart_id):
        return {
            "cart_id": cart_id,
            "customer": {"name": "Asha Rao", "phone": "+919800000001", "email": "asha@example.com"},
            "shipping_address": {
                "line1": "12 MG Road",
                "city": "Bengaluru",
                "state": "Karnataka",
                "postal_code": "560001",
                "country": "IN",
            },
        }

    return _body
