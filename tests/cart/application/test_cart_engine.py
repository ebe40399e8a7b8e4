import pytest
from protean import current_domain
from storefront.cart import engine
from storefront.catalogue.variants import UpdateVariant
from storefront.shared.errors import CartNotOpen, InvalidQuantity, VariantNotFound


class TestCartEngine:
    def test_new_cart_is_empty(self):
        summary = engine.create_cart(session_id="sess-1")
        assert summary.status == "Open"
        assert summary.lines == []
        assert summary.subtotal == 0
        assert summary.currency == "INR"

    def test_upsert_prices_from_catalogue(self, make_variant):
        variant_id = make_variant(price=50000)
        cart_id = engine.create_cart().cart_id

        summary = engine.upsert_item(cart_id, variant_id, 2)

        assert summary.subtotal == 100000
        assert summary.item_count == 2
        line = summary.lines[0]
        assert line.unit_price == 50000
        assert line.line_total == 100000

    def test_upsert_same_variant_replaces(self, make_variant):
        variant_id = make_variant(price=50000)
        cart_id = engine.create_cart().cart_id
        engine.upsert_item(cart_id, variant_id, 2)

        summary = engine.upsert_item(cart_id, variant_id, 3)
        assert len(summary.lines) == 1
        assert summary.subtotal == 150000

    def test_upsert_zero_removes(self, make_variant):
        variant_id = make_variant()
        cart_id = engine.create_cart().cart_id
        engine.upsert_item(cart_id, variant_id, 2)

        assert engine.upsert_item(cart_id, variant_id, 0).lines == []

    def test_remove_item(self, make_variant):
        first, second = make_variant(price=100), make_variant(price=200)
        cart_id = engine.create_cart().cart_id
        engine.upsert_item(cart_id, first, 1)
        engine.upsert_item(cart_id, second, 1)

        summary = engine.remove_item(cart_id, first)
        assert [line.variant_id for line in summary.lines] == [second]
        assert summary.subtotal == 200

    def test_unknown_variant(self):
        cart_id = engine.create_cart().cart_id
        with pytest.raises(VariantNotFound):
            engine.upsert_item(cart_id, "no-such-variant", 1)

    def test_quantity_above_limit(self, make_variant):
        variant_id = make_variant()
        cart_id = engine.create_cart().cart_id
        with pytest.raises(InvalidQuantity):
            engine.upsert_item(cart_id, variant_id, 21)

    def test_cart_reflects_price_changes_until_checkout(self, make_variant):
        variant_id = make_variant(price=1000)
        cart_id = engine.create_cart().cart_id
        engine.upsert_item(cart_id, variant_id, 1)

        current_domain.process(UpdateVariant(variant_id=variant_id, price=1500), asynchronous=False)
        assert engine.read_cart(cart_id).subtotal == 1500

    def test_deactivated_variant_drops_out_of_summary(self, make_variant):
        variant_id = make_variant(price=1000)
        cart_id = engine.create_cart().cart_id
        engine.upsert_item(cart_id, variant_id, 1)

        current_domain.process(UpdateVariant(variant_id=variant_id, is_active=False), asynchronous=False)
        summary = engine.read_cart(cart_id)
        assert summary.lines == []
        assert summary.subtotal == 0

    def test_converted_cart_rejects_changes(self, make_variant, cart_with, customer, shipping_address):
        from storefront.checkout import orchestrator

        variant_id = make_variant()
        cart_id = cart_with((variant_id, 1))
        orchestrator.checkout(cart_id, customer, shipping_address)

        with pytest.raises(CartNotOpen):
            engine.upsert_item(cart_id, variant_id, 2)
        assert engine.read_cart(cart_id).status == "Converted"
