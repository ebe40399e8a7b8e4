"""Payment verifier — the only path by which an order becomes paid.

Two entry points reach the same settlement:
- `verify()` handles the signed callback the client relays after paying.
- `handle_webhook()` handles the provider's signed server-to-server events.

Settlement commits every reserved line before the order is marked
completed, and is idempotent: a repeated callback for a settled order
succeeds without committing stock again. All state changes for one order
run under that order's lock, shared with cancellation and expiry.
"""

import json

import structlog
from protean.utils.globals import current_domain

from storefront.inventory import ledger
from storefront.order.order import Order, OrderStatus
from storefront.order.payment import (
    RecordPaymentAuthorization,
    RecordPaymentFailure,
    SettlePayment,
)
from storefront.payments.gateway import get_gateway
from storefront.shared.errors import InvalidInput, InvalidSignature, UnknownTransaction
from storefront.shared.locks import order_locks

logger = structlog.get_logger(__name__)

WEBHOOK_PAYMENT_AUTHORIZED = "payment.authorized"
WEBHOOK_PAYMENT_CAPTURED = "payment.captured"
WEBHOOK_PAYMENT_FAILED = "payment.failed"


def _order_for(provider_order_ref) -> Order:
    matches = (
        current_domain.repository_for(Order)._dao.query.filter(provider_order_ref=provider_order_ref).all().items
    )
    if not matches:
        raise UnknownTransaction(provider_order_ref)
    return matches[0]


def _settle(order_id, provider_payment_ref) -> Order:
    repo = current_domain.repository_for(Order)
    with order_locks.hold(order_id):
        order = repo.get(str(order_id))
        if order.is_settled:
            logger.info("Duplicate payment confirmation ignored", order_id=str(order_id))
            return order
        order.ensure_can_transition(OrderStatus.COMPLETED)

        for item in order.items:
            ledger.commit(item.variant_id, order_id=order.id)
        current_domain.process(
            SettlePayment(order_id=str(order_id), provider_payment_ref=provider_payment_ref),
            asynchronous=False,
        )

    logger.info("Payment settled", order_id=str(order_id), provider_payment_ref=provider_payment_ref)
    return repo.get(str(order_id))


def _authorize(order_id, provider_payment_ref) -> None:
    with order_locks.hold(order_id):
        current_domain.process(
            RecordPaymentAuthorization(order_id=str(order_id), provider_payment_ref=provider_payment_ref),
            asynchronous=False,
        )


def _fail(order_id, provider_payment_ref, reason) -> None:
    with order_locks.hold(order_id):
        order = current_domain.repository_for(Order).get(str(order_id))
        if not order.is_open:
            logger.info("Payment failure ignored for closed order", order_id=str(order_id), status=order.status)
            return

        for item in order.items:
            ledger.release(item.variant_id, order_id=order.id, reason="payment_failed")
        current_domain.process(
            RecordPaymentFailure(
                order_id=str(order_id),
                provider_payment_ref=provider_payment_ref,
                reason=reason,
            ),
            asynchronous=False,
        )
    logger.info("Payment failed", order_id=str(order_id), reason=reason)


def verify(provider_order_ref, provider_payment_ref, signature) -> Order:
    """Settle an order from the client's signed payment callback.

    Raises InvalidInput for missing fields, InvalidSignature on a bad
    signature, UnknownTransaction when no order carries the reference and
    InvalidState when the order was closed before payment arrived.
    """
    missing = {
        name: ["This field is required"]
        for name, value in (
            ("provider_order_ref", provider_order_ref),
            ("provider_payment_ref", provider_payment_ref),
            ("signature", signature),
        )
        if not value
    }
    if missing:
        raise InvalidInput(missing)

    if not get_gateway().verify_payment_signature(provider_order_ref, provider_payment_ref, signature):
        logger.warning(
            "Payment signature mismatch",
            provider_order_ref=provider_order_ref,
            provider_payment_ref=provider_payment_ref,
        )
        raise InvalidSignature()

    order = _order_for(provider_order_ref)
    return _settle(order.id, provider_payment_ref)


def _payment_entity(body: dict) -> dict:
    """Return ``payload.payment.entity``, or an empty dict when any level is not an object."""
    node = body
    for key in ("payload", "payment", "entity"):
        node = node.get(key)
        if not isinstance(node, dict):
            return {}
    return node


def handle_webhook(payload: bytes, signature: str | None) -> str:
    """Apply a signed provider webhook and return what was done with it.

    Outcomes: "authorized", "settled", "failed" or "ignored".
    """
    if not signature:
        raise InvalidInput({"signature": ["Missing webhook signature"]})
    if not get_gateway().verify_webhook_signature(payload, signature):
        logger.warning("Webhook signature mismatch", body_length=len(payload))
        raise InvalidSignature()

    try:
        body = json.loads(payload)
    except ValueError:
        raise InvalidInput({"payload": ["Webhook body is not valid JSON"]}) from None

    if not isinstance(body, dict):
        raise InvalidInput({"payload": ["Webhook body must be a JSON object"]})

    event = body.get("event")
    entity = _payment_entity(body)
    provider_order_ref = entity.get("order_id")
    provider_payment_ref = entity.get("id")

    if event not in (WEBHOOK_PAYMENT_AUTHORIZED, WEBHOOK_PAYMENT_CAPTURED, WEBHOOK_PAYMENT_FAILED):
        logger.info("Ignoring webhook event", webhook_event=event)
        return "ignored"
    if not all(isinstance(ref, str) and ref for ref in (provider_order_ref, provider_payment_ref)):
        logger.info("Ignoring webhook without payment references", webhook_event=event)
        return "ignored"

    order = _order_for(provider_order_ref)
    logger.info("Webhook received", webhook_event=event, order_id=str(order.id))

    if event == WEBHOOK_PAYMENT_AUTHORIZED:
        _authorize(order.id, provider_payment_ref)
        return "authorized"
    if event == WEBHOOK_PAYMENT_CAPTURED:
        _settle(order.id, provider_payment_ref)
        return "settled"

    reason = entity.get("error_description") or entity.get("error_code") or "Payment failed"
    _fail(order.id, provider_payment_ref, reason=str(reason)[:500])
    return "failed"
