"""Shared BDD fixtures and step definitions for the checkout lifecycle."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.cart import engine
from storefront.inventory import ledger
from storefront.order.order import Order


@pytest.fixture()
def variants():
    """Maps feature-file variant labels to variant ids."""
    return {}


@pytest.fixture()
def carts():
    return []


@pytest.fixture()
def outcome():
    return {}


@given(parsers.cfparse('variant "{label}" priced at {price:d} with {stock:d} units on hand'))
def _(variants, make_variant, label, price, stock):
    variants[label] = make_variant(price=price, stock=stock, sku=f"BDD-{label}", title=label)


@given(parsers.cfparse('a cart holding {quantity:d} of "{label}"'))
@given(parsers.cfparse('another cart holding {quantity:d} of "{label}"'))
def _(carts, cart_with, variants, quantity, label):
    carts.append(cart_with((variants[label], quantity)))


@then(parsers.cfparse('"{label}" has {on_hand:d} on hand and {reserved:d} reserved'))
def _(variants, label, on_hand, reserved):
    levels = ledger.levels(variants[label])
    assert levels.on_hand == on_hand
    assert levels.reserved == reserved
    assert levels.available == on_hand - reserved


@then(parsers.cfparse("the cart subtotal is {subtotal:d}"))
def _(carts, subtotal):
    assert engine.read_cart(carts[-1]).subtotal == subtotal


@then(parsers.cfparse('the order status is "{status}"'))
def _(outcome, status):
    order = current_domain.repository_for(Order).get(outcome["result"].order_id)
    assert order.status == status
