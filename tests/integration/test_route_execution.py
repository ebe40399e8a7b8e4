"""Core calls block on locks and provider HTTP, so they must run off the event loop."""

import inspect
import threading

import pytest
from fastapi.routing import APIRoute
from storefront.api import admin_router, cart_router, checkout_router, payment_router
from storefront.checkout import orchestrator
from storefront.checkout.orchestrator import CheckoutResult
from storefront.payments import verifier


def _routes():
    for router in (cart_router, checkout_router, payment_router, admin_router):
        for route in router.routes:
            if isinstance(route, APIRoute):
                yield route


@pytest.mark.parametrize(
    "route",
    [route for route in _routes() if route.name != "payment_webhook"],
    ids=lambda route: route.name,
)
def test_core_routes_are_plain_functions(route):
    assert not inspect.iscoroutinefunction(route.endpoint)


def test_checkout_runs_in_a_worker_thread(client, checkout_body, monkeypatch):
    seen = {}

    def fake_checkout(cart_id, customer, shipping_address):
        seen["thread"] = threading.current_thread().name
        return CheckoutResult(
            order_id="ord-1",
            amount=1000,
            currency="INR",
            provider="fake",
            provider_order_ref="order_fake1",
            key_id="fake_key",
        )

    monkeypatch.setattr(orchestrator, "checkout", fake_checkout)

    response = client.post("/checkout", json=checkout_body("cart-1"))

    assert response.status_code == 201
    assert seen["thread"] == "AnyIO worker thread"


def test_webhook_runs_in_a_worker_thread(client, monkeypatch):
    seen = {}

    def fake_handle_webhook(payload, signature):
        seen["thread"] = threading.current_thread().name
        return "ignored"

    monkeypatch.setattr(verifier, "handle_webhook", fake_handle_webhook)

    response = client.post("/payments/webhook", content=b"{}", headers={"X-Razorpay-Signature": "sig"})

    assert response.status_code == 200
    assert response.json()["outcome"] == "ignored"
    assert seen["thread"] == "AnyIO worker thread"
