"""Computed cart view with live catalogue prices."""

from dataclasses import dataclass, field

import structlog

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.lookup import get_variant
from storefront.shared.errors import VariantNotFound

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    variant_id: str
    sku: str
    product_name: str
    variant_title: str
    unit_price: int
    quantity: int
    line_total: int


@dataclass(frozen=True)
class CartSummary:
    cart_id: str
    status: str
    currency: str
    lines: list[CartLine] = field(default_factory=list)
    subtotal: int = 0

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


def summarize_cart(cart: ShoppingCart, currency: str) -> CartSummary:
    """Price each line from the current catalogue.

    Lines whose variant is no longer purchasable are left out of the view.
    """
    lines = []
    for item in cart.ordered_items():
        try:
            variant = get_variant(item.variant_id)
        except VariantNotFound:
            logger.warning("Skipping cart line for missing variant", cart_id=str(cart.id), variant_id=str(item.variant_id))
            continue

        lines.append(
            CartLine(
                variant_id=variant.variant_id,
                sku=variant.sku,
                product_name=variant.product_name,
                variant_title=variant.title,
                unit_price=variant.unit_price,
                quantity=item.quantity,
                line_total=variant.unit_price * item.quantity,
            )
        )

    return CartSummary(
        cart_id=str(cart.id),
        status=cart.status,
        currency=currency,
        lines=lines,
        subtotal=sum(line.line_total for line in lines),
    )
