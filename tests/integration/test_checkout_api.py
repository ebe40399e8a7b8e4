"""Integration tests for checkout, cancellation and payment endpoints."""

import json

import pytest


@pytest.fixture()
def checked_out(client, api_variant, checkout_body):
    variant_id = api_variant(price=50000, stock=5)
    cart_id = client.post("/carts").json()["cart_id"]
    client.put(f"/carts/{cart_id}/items/{variant_id}", json={"quantity": 2})

    response = client.post("/checkout", json=checkout_body(cart_id))
    assert response.status_code == 201
    return variant_id, cart_id, response.json()


def _levels(client, variant_id):
    body = client.get(f"/admin/inventory/{variant_id}").json()
    return body["on_hand"], body["reserved"], body["available"]


class TestCheckoutEndpoint:
    def test_checkout_response(self, client, checked_out):
        variant_id, cart_id, body = checked_out
        assert body["amount"] == 100000
        assert body["currency"] == "INR"
        assert body["provider"] == "fake"
        assert body["key_id"] == "fake_key"
        assert _levels(client, variant_id) == (5, 2, 3)

        assert client.get(f"/carts/{cart_id}").json()["status"] == "Converted"

    def test_checkout_converted_cart_conflicts(self, client, checked_out, checkout_body):
        _, cart_id, _ = checked_out
        response = client.post("/checkout", json=checkout_body(cart_id))
        assert response.status_code == 409
        assert response.json()["error"] == "cart_not_open"

    def test_insufficient_stock(self, client, api_variant, checkout_body):
        variant_id = api_variant(stock=1)
        cart_id = client.post("/carts").json()["cart_id"]
        client.put(f"/carts/{cart_id}/items/{variant_id}", json={"quantity": 2})

        response = client.post("/checkout", json=checkout_body(cart_id))
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "insufficient_stock"
        assert body["variant_id"] == variant_id
        assert body["available"] == 1
        assert body["requested"] == 2

    def test_empty_cart(self, client, checkout_body):
        cart_id = client.post("/carts").json()["cart_id"]
        response = client.post("/checkout", json=checkout_body(cart_id))
        assert response.status_code == 400

    def test_provider_down(self, client, api_variant, checkout_body, gateway):
        variant_id = api_variant(stock=5)
        cart_id = client.post("/carts").json()["cart_id"]
        client.put(f"/carts/{cart_id}/items/{variant_id}", json={"quantity": 2})
        gateway.configure(should_succeed=False, failure_reason="upstream timeout")

        response = client.post("/checkout", json=checkout_body(cart_id))
        assert response.status_code == 502
        assert response.json()["detail"] == "payment provider unavailable, please retry"
        assert _levels(client, variant_id) == (5, 0, 5)


class TestCancelEndpoint:
    def test_cancel(self, client, checked_out):
        variant_id, _, body = checked_out
        response = client.post(f"/orders/{body['order_id']}/cancel", json={"reason": "changed my mind"})
        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"
        assert _levels(client, variant_id) == (5, 0, 5)

    def test_cancel_without_body(self, client, checked_out):
        _, _, body = checked_out
        assert client.post(f"/orders/{body['order_id']}/cancel").json()["status"] == "Cancelled"


class TestVerifyEndpoint:
    def test_verify_with_provider_field_names(self, client, checked_out, gateway):
        variant_id, _, body = checked_out
        ref = body["provider_order_ref"]
        response = client.post(
            "/payments/verify",
            json={
                "razorpay_order_id": ref,
                "razorpay_payment_id": "pay_001",
                "razorpay_signature": gateway.sign_payment(ref, "pay_001"),
            },
        )
        assert response.status_code == 200
        assert response.json()["status"] == "Completed"
        assert response.json()["payment_status"] == "Paid"
        assert _levels(client, variant_id) == (3, 0, 3)

    def test_invalid_signature_is_opaque(self, client, checked_out):
        _, _, body = checked_out
        response = client.post(
            "/payments/verify",
            json={"provider_order_ref": body["provider_order_ref"], "provider_payment_ref": "pay_001", "signature": "x"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "invalid_signature", "detail": "payment verification failed"}

    def test_missing_fields(self, client):
        assert client.post("/payments/verify", json={}).status_code == 400

    def test_paying_a_cancelled_order_conflicts(self, client, checked_out, gateway):
        _, _, body = checked_out
        client.post(f"/orders/{body['order_id']}/cancel")
        ref = body["provider_order_ref"]
        response = client.post(
            "/payments/verify",
            json={
                "provider_order_ref": ref,
                "provider_payment_ref": "pay_001",
                "signature": gateway.sign_payment(ref, "pay_001"),
            },
        )
        assert response.status_code == 409


class TestWebhookEndpoint:
    def _payload(self, event, ref):
        return json.dumps(
            {"event": event, "payload": {"payment": {"entity": {"id": "pay_001", "order_id": ref}}}}
        ).encode()

    def test_captured_webhook(self, client, checked_out, gateway):
        variant_id, _, body = checked_out
        payload = self._payload("payment.captured", body["provider_order_ref"])
        response = client.post(
            "/payments/webhook",
            content=payload,
            headers={"X-Razorpay-Signature": gateway.sign_webhook(payload), "Content-Type": "application/json"},
        )
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "outcome": "settled"}
        assert _levels(client, variant_id) == (3, 0, 3)

    def test_unsigned_webhook(self, client, checked_out):
        payload = self._payload("payment.captured", checked_out[2]["provider_order_ref"])
        response = client.post("/payments/webhook", content=payload)
        assert response.status_code == 400

    def test_webhook_with_bad_signature(self, client, checked_out):
        payload = self._payload("payment.captured", checked_out[2]["provider_order_ref"])
        response = client.post("/payments/webhook", content=payload, headers={"X-Razorpay-Signature": "bad"})
        assert response.status_code == 401
