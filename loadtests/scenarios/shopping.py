"""Shopper load test scenarios.

A SequentialTaskSet journey from an empty cart to a paid, cancelled or
abandoned order, against a catalogue seeded when each user starts.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import checkout_data, payment_callback, product_data, variant_data
from loadtests.helpers.response import extract_error_detail, is_stock_conflict
from loadtests.helpers.state import ShopperState


def seed_variants(client, count: int, initial_stock: int | None = None) -> list[str]:
    """Create one product with `count` variants through the admin API."""
    resp = client.post("/admin/products", json=product_data(), name="POST /admin/products")
    if resp.status_code != 201:
        return []
    product_id = resp.json()["product_id"]

    variant_ids = []
    for _ in range(count):
        resp = client.post(
            f"/admin/products/{product_id}/variants",
            json=variant_data(initial_stock=initial_stock),
            name="POST /admin/products/{id}/variants",
        )
        if resp.status_code == 201:
            variant_ids.append(resp.json()["variant_id"])
    return variant_ids


class ShopperJourney(SequentialTaskSet):
    """Create Cart -> Add Items -> Adjust -> Checkout -> Pay | Cancel | Abandon.

    Models a customer browsing, filling a cart and completing checkout. Most
    shoppers pay; some cancel and some walk away and leave the order to expire.
    """

    def on_start(self):
        self.state = ShopperState(variant_ids=list(self.user.variant_ids))

    @task
    def create_cart(self):
        with self.client.post("/carts", json={}, catch_response=True, name="POST /carts") as resp:
            if resp.status_code == 201:
                self.state.cart_id = resp.json()["cart_id"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_items(self):
        if not self.state.variant_ids:
            self.interrupt()
        for variant_id in random.sample(self.state.variant_ids, k=min(2, len(self.state.variant_ids))):
            with self.client.put(
                f"/carts/{self.state.cart_id}/items/{variant_id}",
                json={"quantity": random.randint(1, 3)},
                catch_response=True,
                name="PUT /carts/{id}/items/{variant_id}",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Add item failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def view_cart(self):
        self.client.get(f"/carts/{self.state.cart_id}", name="GET /carts/{id}")

    @task
    def checkout(self):
        with self.client.post(
            "/checkout",
            json=checkout_data(self.state.cart_id),
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.provider_order_ref = body["provider_order_ref"]
                self.state.amount = body["amount"]
            elif is_stock_conflict(resp):
                # Sold out is an expected business outcome under load
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def finish(self):
        roll = random.random()
        if roll < 0.8:
            with self.client.post(
                "/payments/verify",
                json=payment_callback(self.state.provider_order_ref),
                catch_response=True,
                name="POST /payments/verify",
            ) as resp:
                if resp.status_code != 200 or resp.json().get("status") != "Completed":
                    resp.failure(f"Verify failed: {resp.status_code} — {extract_error_detail(resp)}")
        elif roll < 0.9:
            self.client.post(
                f"/orders/{self.state.order_id}/cancel",
                json={"reason": "customer_aborted"},
                name="POST /orders/{id}/cancel",
            )
        # Remaining shoppers abandon the order; the expiry worker reclaims the stock
        self.interrupt()


class ShopperUser(HttpUser):
    tasks = [ShopperJourney]
    wait_time = between(0.5, 2)
    weight = 5

    def on_start(self):
        self.variant_ids = seed_variants(self.client, count=4)
