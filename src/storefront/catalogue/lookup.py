"""Read-only catalogue lookups used by the cart and checkout."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.variant import Variant
from storefront.shared.errors import VariantNotFound


@dataclass(frozen=True)
class VariantDetails:
    variant_id: str
    product_id: str
    sku: str
    product_name: str
    title: str
    unit_price: int


def get_variant(variant_id) -> VariantDetails:
    """Resolve a purchasable variant with its current price.

    Deactivated variants and variants of archived products are treated as
    missing.
    """
    try:
        variant = current_domain.repository_for(Variant).get(str(variant_id))
        product = current_domain.repository_for(Product).get(str(variant.product_id))
    except ObjectNotFoundError:
        raise VariantNotFound(variant_id) from None

    if not variant.is_active or product.is_archived:
        raise VariantNotFound(variant_id)

    return VariantDetails(
        variant_id=str(variant.id),
        product_id=str(product.id),
        sku=variant.sku,
        product_name=product.name,
        title=variant.title,
        unit_price=variant.price,
    )
