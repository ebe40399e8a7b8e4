"""Domain events for the Product and Variant aggregates."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    status: String(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    status: String(required=True)
    updated_at: DateTime(required=True)


@storefront.event(part_of="Variant")
class VariantAdded:
    """A new purchasable variant was added to a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    sku: String(required=True)
    title: String(required=True)
    price: Integer(required=True)
    initial_stock: Integer(default=0)
    created_at: DateTime(required=True)


@storefront.event(part_of="Variant")
class VariantUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    title: String(required=True)
    price: Integer(required=True)
    compare_at_price: Integer()
    is_active: Boolean(required=True)
    updated_at: DateTime(required=True)
