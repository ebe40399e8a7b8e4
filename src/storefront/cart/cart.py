"""Shopping Cart aggregate (CQRS) — a mutable selection that converts to an Order at checkout.

Lines are keyed by variant: setting the quantity of a variant already in the
cart replaces its quantity in place, so line order follows first insertion.
Prices are never stored on the cart; they are read from the catalogue when
the cart is summarized.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from storefront.cart.events import (
    CartConverted,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from storefront.domain import storefront
from storefront.shared.errors import CartNotOpen, InvalidInput, InvalidQuantity


class CartStatus(Enum):
    OPEN = "Open"
    CONVERTED = "Converted"


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    status = String(choices=CartStatus, default=CartStatus.OPEN.value)
    order_id = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def converted_cart_must_reference_its_order(self):
        if self.status == CartStatus.CONVERTED.value and not self.order_id:
            raise ValidationError({"order_id": ["A converted cart must reference its order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id=None):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            status=CartStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self.status == CartStatus.OPEN.value

    def ensure_open(self):
        if not self.is_open:
            raise CartNotOpen(self.id, self.status)

    def item_for(self, variant_id):
        return next((i for i in self.items if str(i.variant_id) == str(variant_id)), None)

    def ordered_items(self) -> list:
        """Lines in the order they were first added."""
        return sorted(self.items, key=lambda i: i.added_at or self.created_at)

    def set_item_quantity(self, variant_id, quantity, max_quantity):
        """Set the quantity of a variant's line, creating or removing it as needed."""
        self.ensure_open()
        if quantity is None or quantity < 0 or quantity > max_quantity:
            raise InvalidQuantity(quantity, minimum=0, maximum=max_quantity)

        if quantity == 0:
            self.remove_item(variant_id)
            return

        now = datetime.now(UTC)
        existing = self.item_for(variant_id)
        if existing:
            previous_quantity = existing.quantity
            if previous_quantity == quantity:
                return
            existing.quantity = quantity
            self.updated_at = now
            self.raise_(
                CartQuantityUpdated(
                    cart_id=str(self.id),
                    variant_id=str(variant_id),
                    previous_quantity=previous_quantity,
                    new_quantity=quantity,
                )
            )
        else:
            self.add_items(CartItem(variant_id=variant_id, quantity=quantity, added_at=now))
            self.updated_at = now
            self.raise_(
                CartItemAdded(
                    cart_id=str(self.id),
                    variant_id=str(variant_id),
                    quantity=quantity,
                )
            )

    def remove_item(self, variant_id):
        """Remove a variant's line. Removing an absent line changes nothing."""
        self.ensure_open()
        item = self.item_for(variant_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                variant_id=str(variant_id),
            )
        )

    # -------------------------------------------------------------------
    # Cart lifecycle
    # -------------------------------------------------------------------
    def convert_to_order(self, order_id):
        """Close the cart once an order has been placed from it."""
        self.ensure_open()
        if not self.items:
            raise InvalidInput({"cart": ["Cannot convert an empty cart"]})

        items_snapshot = [
            {"variant_id": str(item.variant_id), "quantity": item.quantity} for item in self.ordered_items()
        ]

        with atomic_change(self):
            self.order_id = order_id
            self.status = CartStatus.CONVERTED.value
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                order_id=str(order_id),
                items=json.dumps(items_snapshot),
            )
        )
