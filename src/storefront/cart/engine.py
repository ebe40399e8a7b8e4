"""Cart engine — the application entry points for cart mutations and reads.

Each mutation runs under the cart's lock and returns the recomputed summary,
so callers never re-fetch.
"""

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import RemoveCartItem, UpsertCartItem
from storefront.cart.management import CreateCart
from storefront.cart.summary import CartSummary, summarize_cart
from storefront.config import get_settings
from storefront.shared.locks import cart_locks


def read_cart(cart_id) -> CartSummary:
    cart = current_domain.repository_for(ShoppingCart).get(str(cart_id))
    return summarize_cart(cart, currency=get_settings().currency)


def create_cart(session_id=None) -> CartSummary:
    cart_id = current_domain.process(CreateCart(session_id=session_id), asynchronous=False)
    return read_cart(cart_id)


def upsert_item(cart_id, variant_id, quantity) -> CartSummary:
    with cart_locks.hold(cart_id):
        current_domain.process(
            UpsertCartItem(cart_id=str(cart_id), variant_id=str(variant_id), quantity=quantity),
            asynchronous=False,
        )
        return read_cart(cart_id)


def remove_item(cart_id, variant_id) -> CartSummary:
    with cart_locks.hold(cart_id):
        current_domain.process(
            RemoveCartItem(cart_id=str(cart_id), variant_id=str(variant_id)),
            asynchronous=False,
        )
        return read_cart(cart_id)
