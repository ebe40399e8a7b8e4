from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def gateway():
    """Every test talks to a fresh fake payment provider."""
    from storefront.payments.gateway import reset_gateway, set_gateway
    from storefront.payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture()
def make_product():
    """Factory creating a product through the catalogue commands."""
    from protean import current_domain
    from storefront.catalogue.management import CreateProduct

    def _make(name="Classic Tee", status="Active", **overrides):
        return current_domain.process(
            CreateProduct(name=name, status=status, **overrides),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def make_variant(make_product):
    """Factory creating a purchasable variant with opening stock."""
    from protean import current_domain
    from storefront.catalogue.variants import AddVariant

    counter = {"n": 0}

    def _make(price=50000, stock=10, product_id=None, sku=None, title=None):
        counter["n"] += 1
        product_id = product_id or make_product(name=f"Product {counter['n']}")
        return current_domain.process(
            AddVariant(
                product_id=product_id,
                sku=sku or f"SKU-{counter['n']:03d}",
                title=title or f"Variant {counter['n']}",
                price=price,
                initial_stock=stock,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def customer():
    from storefront.checkout.orchestrator import CustomerDetails

    return CustomerDetails(name="Asha Rao", phone="+919800000001", email="asha@example.com")


@pytest.fixture()
def shipping_address():
    from storefront.checkout.orchestrator import ShippingDetails

    return ShippingDetails(
        line1="12 MG Road",
        city="Bengaluru",
        state="Karnataka",
        postal_code="560001",
        country="IN",
    )


@pytest.fixture()
def cart_with(make_variant):
    """Factory returning a cart id holding the given (variant_id, quantity) lines."""
    from storefront.cart import engine

    def _make(*lines):
        cart_id = engine.create_cart().cart_id
        for variant_id, quantity in lines:
            engine.upsert_item(cart_id, variant_id, quantity)
        return cart_id

    return _make
