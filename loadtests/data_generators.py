"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation rules
and match the exact field names expected by the API's Pydantic request
schemas. Amounts are integer minor currency units.
"""

import hashlib
import hmac
import random
import uuid

from faker import Faker

fake = Faker("en_IN")

# Matches FakeGateway's default key secret; the load-test server runs without
# provider credentials.
FAKE_KEY_SECRET = "fake-key-secret"


# ---------- Catalogue ----------


def product_data() -> dict:
    name = f"{fake.color_name()} {random.choice(['Tee', 'Hoodie', 'Cap', 'Tote', 'Mug'])}"
    return {
        "name": name,
        "slug": f"{fake.slug()}-{uuid.uuid4().hex[:6]}",
        "description": fake.sentence(nb_words=12),
        "status": "Active",
    }


def variant_data(initial_stock: int | None = None) -> dict:
    size = random.choice(["S", "M", "L", "XL"])
    price = random.randint(199, 4999) * 100
    return {
        "sku": f"LT-{uuid.uuid4().hex[:10].upper()}",
        "title": size,
        "size": size,
        "color": fake.color_name()[:50],
        "price": price,
        "compare_at_price": price + random.choice([0, 10000, 25000]),
        "initial_stock": random.randint(50, 500) if initial_stock is None else initial_stock,
    }


# ---------- Checkout ----------


def customer_data() -> dict:
    return {
        "name": fake.name()[:255],
        "phone": f"+91{random.randint(6000000000, 9999999999)}",
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
    }


def shipping_address_data() -> dict:
    return {
        "line1": fake.street_address()[:255],
        "line2": random.choice([None, f"Flat {random.randint(1, 999)}"]),
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "postal_code": fake.postcode()[:20],
        "country": "IN",
    }


def checkout_data(cart_id: str) -> dict:
    return {
        "cart_id": cart_id,
        "customer": customer_data(),
        "shipping_address": shipping_address_data(),
    }


def payment_callback(provider_order_ref: str) -> dict:
    """A payment callback as the provider's checkout widget would relay it."""
    payment_ref = f"pay_{uuid.uuid4().hex[:14]}"
    signature = hmac.new(
        FAKE_KEY_SECRET.encode(),
        f"{provider_order_ref}|{payment_ref}".encode(),
        hashlib.sha256,
    ).hexdigest()
    return {
        "razorpay_order_id": provider_order_ref,
        "razorpay_payment_id": payment_ref,
        "razorpay_signature": signature,
    }
