import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from storefront.catalogue.lookup import get_variant
from storefront.catalogue.management import CreateProduct, UpdateProduct
from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant
from storefront.catalogue.variants import AddVariant, UpdateVariant
from storefront.inventory import ledger
from storefront.shared.errors import InvalidInput, VariantNotFound


class TestProductCommands:
    def test_create_product_returns_id(self):
        product_id = current_domain.process(CreateProduct(name="Canvas Tote", status="Active"), asynchronous=False)
        product = current_domain.repository_for(Product).get(product_id)
        assert product.slug == "canvas-tote"

    def test_duplicate_slug_is_rejected(self):
        current_domain.process(CreateProduct(name="Canvas Tote"), asynchronous=False)
        with pytest.raises(InvalidInput) as exc:
            current_domain.process(CreateProduct(name="Canvas Tote"), asynchronous=False)
        assert "slug" in exc.value.messages

    def test_update_product_keeps_its_own_slug(self, make_product):
        product_id = make_product(name="Canvas Tote")
        current_domain.process(
            UpdateProduct(product_id=product_id, slug="canvas-tote", description="Heavy canvas"),
            asynchronous=False,
        )
        assert current_domain.repository_for(Product).get(product_id).description == "Heavy canvas"


class TestVariantCommands:
    def test_add_variant_opens_stock(self, make_product):
        product_id = make_product()
        variant_id = current_domain.process(
            AddVariant(product_id=product_id, sku="TOTE-NAT", title="Natural", price=49900, initial_stock=7),
            asynchronous=False,
        )

        levels = ledger.levels(variant_id)
        assert levels.on_hand == 7
        assert levels.reserved == 0
        assert levels.available == 7
        assert levels.sku == "TOTE-NAT"

    def test_add_variant_without_opening_stock(self, make_product):
        variant_id = current_domain.process(
            AddVariant(product_id=make_product(), sku="TOTE-RED", title="Red", price=49900),
            asynchronous=False,
        )
        assert ledger.levels(variant_id).on_hand == 0

    def test_duplicate_sku_is_rejected(self, make_variant):
        make_variant(sku="TOTE-NAT")
        with pytest.raises(InvalidInput) as exc:
            make_variant(sku="TOTE-NAT")
        assert "sku" in exc.value.messages

    def test_unknown_product_is_rejected(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                AddVariant(product_id="missing", sku="X-1", title="X", price=100),
                asynchronous=False,
            )

    def test_update_variant_price(self, make_variant):
        variant_id = make_variant(price=1000)
        current_domain.process(UpdateVariant(variant_id=variant_id, price=1200), asynchronous=False)
        assert current_domain.repository_for(Variant).get(variant_id).price == 1200


class TestVariantLookup:
    def test_lookup_returns_current_price_and_names(self, make_product, make_variant):
        product_id = make_product(name="Canvas Tote")
        variant_id = make_variant(product_id=product_id, price=49900, title="Natural")

        details = get_variant(variant_id)
        assert details.unit_price == 49900
        assert details.product_name == "Canvas Tote"
        assert details.title == "Natural"

    def test_unknown_variant(self):
        with pytest.raises(VariantNotFound):
            get_variant("does-not-exist")

    def test_inactive_variant_is_not_purchasable(self, make_variant):
        variant_id = make_variant()
        current_domain.process(UpdateVariant(variant_id=variant_id, is_active=False), asynchronous=False)
        with pytest.raises(VariantNotFound):
            get_variant(variant_id)

    def test_variant_of_archived_product_is_not_purchasable(self, make_product, make_variant):
        product_id = make_product()
        variant_id = make_variant(product_id=product_id)
        current_domain.process(UpdateProduct(product_id=product_id, status="Archived"), asynchronous=False)
        with pytest.raises(VariantNotFound):
            get_variant(variant_id)
