"""Variant aggregate — a purchasable SKU of a product."""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.aggregate
class Variant:
    """Variant aggregate root. Prices are integer minor currency units."""

    product_id: Identifier(required=True)
    sku: String(required=True, max_length=50)
    title: String(required=True, max_length=255)
    size: String(max_length=50)
    color: String(max_length=50)
    price: Integer(required=True, min_value=0)
    compare_at_price: Integer(min_value=0)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def compare_at_price_must_exceed_price(self):
        if self.compare_at_price is not None and self.compare_at_price < self.price:
            raise ValidationError({"compare_at_price": ["Compare-at price cannot be lower than the price"]})

    @classmethod
    def create(cls, product_id, sku, title, price, size=None, color=None, compare_at_price=None, initial_stock=0):
        from storefront.catalogue.events import VariantAdded

        now = datetime.now(UTC)
        variant = cls(
            product_id=product_id,
            sku=sku,
            title=title,
            size=size,
            color=color,
            price=price,
            compare_at_price=compare_at_price,
            created_at=now,
            updated_at=now,
        )
        variant.raise_(
            VariantAdded(
                product_id=str(product_id),
                variant_id=str(variant.id),
                sku=sku,
                title=title,
                price=price,
                initial_stock=initial_stock,
                created_at=now,
            )
        )
        return variant

    def update(self, title=None, size=None, color=None, price=None, compare_at_price=None, is_active=None):
        from storefront.catalogue.events import VariantUpdated

        with atomic_change(self):
            if title is not None:
                self.title = title
            if size is not None:
                self.size = size
            if color is not None:
                self.color = color
            if price is not None:
                self.price = price
            if compare_at_price is not None:
                self.compare_at_price = compare_at_price
            if is_active is not None:
                self.is_active = is_active
            self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantUpdated(
                product_id=str(self.product_id),
                variant_id=str(self.id),
                title=self.title,
                price=self.price,
                compare_at_price=self.compare_at_price,
                is_active=self.is_active,
                updated_at=self.updated_at,
            )
        )
