from datetime import UTC, datetime, timedelta

from protean import current_domain
from storefront.checkout import orchestrator
from storefront.checkout.expiry import ExpireOverdueCheckouts
from storefront.inventory import ledger
from storefront.order.order import Order, OrderStatus
from storefront.payments import verifier


class TestExpirySweep:
    def test_nothing_to_expire(self):
        assert current_domain.process(ExpireOverdueCheckouts(), asynchronous=False) == 0

    def test_sweep_expires_only_overdue_open_orders(
        self, make_variant, cart_with, customer, shipping_address, gateway
    ):
        variant_id = make_variant(stock=10)
        overdue = orchestrator.checkout(cart_with((variant_id, 1)), customer, shipping_address)
        paid = orchestrator.checkout(cart_with((variant_id, 2)), customer, shipping_address)
        cancelled = orchestrator.checkout(cart_with((variant_id, 3)), customer, shipping_address)

        verifier.verify(
            paid.provider_order_ref,
            "pay_001",
            gateway.sign_payment(paid.provider_order_ref, "pay_001"),
        )
        orchestrator.cancel(cancelled.order_id)

        as_of = datetime.now(UTC) + timedelta(hours=1)
        expired = current_domain.process(ExpireOverdueCheckouts(as_of=as_of), asynchronous=False)

        assert expired == 1
        repo = current_domain.repository_for(Order)
        assert repo.get(overdue.order_id).status == OrderStatus.EXPIRED.value
        assert repo.get(paid.order_id).status == OrderStatus.COMPLETED.value
        assert repo.get(cancelled.order_id).status == OrderStatus.CANCELLED.value

        levels = ledger.levels(variant_id)
        assert (levels.on_hand, levels.reserved, levels.available) == (8, 0, 8)

    def test_second_sweep_finds_nothing(self, make_variant, cart_with, customer, shipping_address):
        variant_id = make_variant(stock=10)
        orchestrator.checkout(cart_with((variant_id, 1)), customer, shipping_address)
        as_of = datetime.now(UTC) + timedelta(hours=1)

        assert current_domain.process(ExpireOverdueCheckouts(as_of=as_of), asynchronous=False) == 1
        assert current_domain.process(ExpireOverdueCheckouts(as_of=as_of), asynchronous=False) == 0

    def test_worker_sweep_leaves_fresh_orders(self, make_variant, cart_with, customer, shipping_address):
        import server

        variant_id = make_variant(stock=10)
        orchestrator.checkout(cart_with((variant_id, 1)), customer, shipping_address)
        assert server.sweep() == 0
