"""BDD tests for the checkout lifecycle."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when
from storefront.cart import engine
from storefront.checkout import orchestrator
from storefront.checkout.expiry import ExpireOverdueCheckouts
from storefront.domain import storefront
from storefront.payments import verifier
from storefront.shared.errors import InsufficientStock

scenarios("features/checkout.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("both carts check out at the same time")
def _(carts, outcome, customer, shipping_address):
    barrier = threading.Barrier(len(carts))

    def attempt(cart_id):
        with storefront.domain_context():
            barrier.wait()
            try:
                return orchestrator.checkout(cart_id, customer, shipping_address)
            except InsufficientStock as exc:
                return exc

    with ThreadPoolExecutor(max_workers=len(carts)) as pool:
        outcome["results"] = list(pool.map(attempt, carts))


@when(parsers.cfparse('{quantity:d} of "{label}" is added to the cart'))
@when(parsers.cfparse('the quantity of "{label}" is set to {quantity:d}'))
def _(carts, variants, quantity, label):
    engine.upsert_item(carts[-1], variants[label], quantity)


@when("the cart checks out")
def _(carts, outcome, customer, shipping_address):
    outcome["result"] = orchestrator.checkout(carts[-1], customer, shipping_address)


@when("a correctly signed payment confirmation arrives")
def _(outcome, gateway):
    ref = outcome["result"].provider_order_ref
    verifier.verify(ref, "pay_bdd_001", gateway.sign_payment(ref, "pay_bdd_001"))


@when("the payment deadline passes without payment")
def _():
    as_of = datetime.now(UTC) + timedelta(minutes=16)
    current_domain.process(ExpireOverdueCheckouts(as_of=as_of), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("exactly one checkout succeeds")
def _(outcome):
    succeeded = [r for r in outcome["results"] if not isinstance(r, Exception)]
    assert len(succeeded) == 1


@then("the other checkout fails with insufficient stock")
def _(outcome):
    failed = [r for r in outcome["results"] if isinstance(r, InsufficientStock)]
    assert len(failed) == 1
    assert failed[0].available == 2
