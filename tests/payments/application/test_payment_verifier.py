import pytest
from protean import current_domain
from storefront.checkout import orchestrator
from storefront.inventory import ledger
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.payments import verifier
from storefront.shared.errors import InvalidInput, InvalidSignature, InvalidState, UnknownTransaction


@pytest.fixture()
def placed(make_variant, cart_with, customer, shipping_address):
    """A checkout awaiting payment for 2 units of a 5-unit variant."""
    variant_id = make_variant(stock=5)
    result = orchestrator.checkout(cart_with((variant_id, 2)), customer, shipping_address)
    return variant_id, result


def _levels(variant_id):
    snapshot = ledger.levels(variant_id)
    return snapshot.on_hand, snapshot.reserved, snapshot.available


class TestVerify:
    def test_valid_callback_settles_and_commits_stock(self, placed, gateway):
        variant_id, result = placed
        signature = gateway.sign_payment(result.provider_order_ref, "pay_001")

        order = verifier.verify(result.provider_order_ref, "pay_001", signature)

        assert order.status == OrderStatus.COMPLETED.value
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.provider_payment_ref == "pay_001"
        assert _levels(variant_id) == (3, 0, 3)

    def test_repeated_callback_is_idempotent(self, placed, gateway):
        variant_id, result = placed
        signature = gateway.sign_payment(result.provider_order_ref, "pay_001")
        verifier.verify(result.provider_order_ref, "pay_001", signature)

        order = verifier.verify(result.provider_order_ref, "pay_001", signature)

        assert order.status == OrderStatus.COMPLETED.value
        assert _levels(variant_id) == (3, 0, 3)

    def test_bad_signature_changes_nothing(self, placed):
        variant_id, result = placed
        with pytest.raises(InvalidSignature):
            verifier.verify(result.provider_order_ref, "pay_001", "0" * 64)

        order = current_domain.repository_for(Order).get(result.order_id)
        assert order.status == OrderStatus.AWAITING_PAYMENT.value
        assert _levels(variant_id) == (5, 2, 3)

    def test_unknown_transaction(self, gateway):
        with pytest.raises(UnknownTransaction):
            verifier.verify("order_missing", "pay_001", gateway.sign_payment("order_missing", "pay_001"))

    def test_missing_fields(self):
        with pytest.raises(InvalidInput) as exc:
            verifier.verify("order_1", "", None)
        assert set(exc.value.messages) == {"provider_payment_ref", "signature"}

    def test_payment_after_cancellation_is_rejected(self, placed, gateway):
        variant_id, result = placed
        orchestrator.cancel(result.order_id)

        with pytest.raises(InvalidState):
            verifier.verify(
                result.provider_order_ref,
                "pay_001",
                gateway.sign_payment(result.provider_order_ref, "pay_001"),
            )
        assert _levels(variant_id) == (5, 0, 5)

    def test_cancel_after_payment_is_rejected(self, placed, gateway):
        variant_id, result = placed
        verifier.verify(
            result.provider_order_ref,
            "pay_001",
            gateway.sign_payment(result.provider_order_ref, "pay_001"),
        )

        with pytest.raises(InvalidState):
            orchestrator.cancel(result.order_id)
        assert _levels(variant_id) == (3, 0, 3)
