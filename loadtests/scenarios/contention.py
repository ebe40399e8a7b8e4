"""Hot-variant contention scenario.

Many users race to check out the same scarce variant. Exactly as many
checkouts as there are units may succeed; everything else must be a clean
409 insufficient_stock, never an oversell. After the run compare
GET /admin/inventory/{variant_id} with the number of successful checkouts.
"""

from locust import HttpUser, between, events, task

from loadtests.data_generators import checkout_data, payment_callback
from loadtests.helpers.response import extract_error_detail, is_stock_conflict
from loadtests.scenarios.shopping import seed_variants

HOT_STOCK = 25

_hot = {"variant_id": None}


@events.test_start.add_listener
def _reset_hot_variant(**_kwargs):
    _hot["variant_id"] = None


class HotVariantUser(HttpUser):
    """Checks out one unit of the shared hot variant as fast as possible."""

    wait_time = between(0.05, 0.2)
    weight = 1

    def on_start(self):
        if _hot["variant_id"] is None:
            seeded = seed_variants(self.client, count=1, initial_stock=HOT_STOCK)
            if seeded:
                _hot["variant_id"] = seeded[0]

    @task
    def grab_last_units(self):
        variant_id = _hot["variant_id"]
        if variant_id is None:
            return

        resp = self.client.post("/carts", json={}, name="[HOT] POST /carts")
        if resp.status_code != 201:
            return
        cart_id = resp.json()["cart_id"]
        self.client.put(f"/carts/{cart_id}/items/{variant_id}", json={"quantity": 1}, name="[HOT] PUT cart item")

        with self.client.post(
            "/checkout",
            json=checkout_data(cart_id),
            catch_response=True,
            name="[HOT] POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                ref = resp.json()["provider_order_ref"]
                self.client.post("/payments/verify", json=payment_callback(ref), name="[HOT] POST /payments/verify")
            elif is_stock_conflict(resp):
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
