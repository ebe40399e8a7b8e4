"""Cart item management — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.lookup import get_variant
from storefront.config import get_settings
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class UpsertCartItem:
    """Set a variant's quantity in the cart; 0 removes the line."""

    cart_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveCartItem:
    cart_id = Identifier(required=True)
    variant_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(UpsertCartItem)
    def upsert_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.ensure_open()

        max_quantity = get_settings().cart_max_line_quantity
        if command.quantity is not None and 0 < command.quantity <= max_quantity:
            # Raises VariantNotFound
            get_variant(command.variant_id)

        cart.set_item_quantity(
            variant_id=command.variant_id,
            quantity=command.quantity,
            max_quantity=max_quantity,
        )
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(variant_id=command.variant_id)
        repo.add(cart)
