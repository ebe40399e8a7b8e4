"""Checkout orchestrator — converts a cart into a reserved, payable order.

Flow:
    1. Reserve stock for every cart line under the order's id. Any failure
       releases what was reserved so far; checkout is all-or-nothing.
    2. Place the order snapshot and close the cart (one unit of work).
    3. Create the provider transaction for the order total and record its
       reference (order → Awaiting_Payment). A provider failure releases all
       reservations and leaves the order Payment_Failed.

Cancellation and expiry undo step 1 and close the order. Each runs under
the order's lock, shared with payment verification, so whichever arrives
first wins.
"""

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import structlog
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.lookup import get_variant
from storefront.checkout.pricing import compute_totals
from storefront.config import get_settings
from storefront.inventory import ledger
from storefront.order.cancellation import CancelOrder, ExpireOrder
from storefront.order.order import Order, OrderStatus
from storefront.order.payment import RecordPaymentInitiationFailure, RecordProviderTransaction
from storefront.order.placement import PlaceOrder
from storefront.payments.gateway import get_gateway
from storefront.shared.errors import InvalidInput, ProviderUnavailable
from storefront.shared.locks import cart_locks, order_locks

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CustomerDetails:
    name: str
    phone: str
    email: str | None = None


@dataclass(frozen=True)
class ShippingDetails:
    line1: str
    city: str
    state: str
    postal_code: str
    country: str
    line2: str | None = None


@dataclass(frozen=True)
class CheckoutResult:
    order_id: str
    amount: int
    currency: str
    provider: str
    provider_order_ref: str
    key_id: str


@dataclass(frozen=True)
class _Line:
    variant_id: str
    sku: str
    product_name: str
    variant_title: str
    unit_price: int
    quantity: int
    line_total: int


def _validate_details(customer: CustomerDetails, address: ShippingDetails) -> None:
    errors = {}
    for field_name in ("name", "phone"):
        if not (getattr(customer, field_name) or "").strip():
            errors[f"customer.{field_name}"] = ["This field is required"]
    for field_name in ("line1", "city", "state", "postal_code", "country"):
        if not (getattr(address, field_name) or "").strip():
            errors[f"shipping_address.{field_name}"] = ["This field is required"]
    if errors:
        raise InvalidInput(errors)


def _snapshot_lines(cart: ShoppingCart) -> list[_Line]:
    lines = []
    for item in cart.ordered_items():
        variant = get_variant(item.variant_id)
        lines.append(
            _Line(
                variant_id=variant.variant_id,
                sku=variant.sku,
                product_name=variant.product_name,
                variant_title=variant.title,
                unit_price=variant.unit_price,
                quantity=item.quantity,
                line_total=variant.unit_price * item.quantity,
            )
        )
    return lines


def _release_all(order_id, variant_ids, reason) -> None:
    for variant_id in variant_ids:
        ledger.release(variant_id, order_id=order_id, reason=reason)


def _compensate(order_id, variant_ids, reason) -> None:
    """Release every line of a failed checkout, continuing past lines that fail.

    Called while the original failure is being raised, so release errors are
    logged rather than allowed to replace it.
    """
    for variant_id in variant_ids:
        try:
            ledger.release(variant_id, order_id=order_id, reason=reason)
        except Exception:
            logger.exception("Reservation release failed", order_id=order_id, variant_id=variant_id, reason=reason)


def _reserve_all(order_id, lines: list[_Line], expires_at) -> None:
    reserved = []
    try:
        for line in lines:
            ledger.reserve(line.variant_id, line.quantity, order_id=order_id, expires_at=expires_at)
            reserved.append(line.variant_id)
    except Exception:
        _compensate(order_id, reserved, reason="checkout_rolled_back")
        logger.info("Checkout rolled back", order_id=order_id, released_lines=len(reserved))
        raise


def checkout(cart_id, customer: CustomerDetails, shipping_address: ShippingDetails) -> CheckoutResult:
    """Reserve stock for a cart, place its order and hand off to the payment provider."""
    _validate_details(customer, shipping_address)
    settings = get_settings()

    with cart_locks.hold(cart_id):
        cart = current_domain.repository_for(ShoppingCart).get(str(cart_id))
        cart.ensure_open()
        if not cart.items:
            raise InvalidInput({"cart": ["Cart is empty"]})

        lines = _snapshot_lines(cart)
        totals = compute_totals(
            sum(line.line_total for line in lines),
            shipping_flat=settings.shipping_flat_minor,
            tax_rate_bps=settings.tax_rate_bps,
        )
        order_id = str(uuid4())
        deadline = datetime.now(UTC) + timedelta(minutes=settings.payment_timeout_minutes)

        _reserve_all(order_id, lines, expires_at=deadline)
        try:
            current_domain.process(
                PlaceOrder(
                    order_id=order_id,
                    cart_id=str(cart_id),
                    items=json.dumps([asdict(line) for line in lines]),
                    customer=json.dumps(asdict(customer)),
                    shipping_address=json.dumps(asdict(shipping_address)),
                    subtotal=totals.subtotal,
                    shipping=totals.shipping,
                    tax=totals.tax,
                    total=totals.total,
                    currency=settings.currency,
                    payment_deadline=deadline,
                ),
                asynchronous=False,
            )
        except Exception:
            _compensate(order_id, [line.variant_id for line in lines], reason="checkout_rolled_back")
            raise

    logger.info(
        "Order placed",
        order_id=order_id,
        cart_id=str(cart_id),
        total=totals.total,
        line_count=len(lines),
    )

    gateway = get_gateway()
    with order_locks.hold(order_id):
        try:
            provider_order_ref = gateway.create_transaction(
                amount=totals.total,
                currency=settings.currency,
                receipt=order_id,
            )
        except Exception as exc:
            reason = exc.reason if isinstance(exc, ProviderUnavailable) else f"{type(exc).__name__}: {exc}"
            _compensate(order_id, [line.variant_id for line in lines], reason="payment_initiation_failed")
            current_domain.process(
                RecordPaymentInitiationFailure(order_id=order_id, reason=reason[:500]),
                asynchronous=False,
            )
            logger.error("Payment initiation failed", order_id=order_id, provider=gateway.name, error=reason)
            raise

        current_domain.process(
            RecordProviderTransaction(
                order_id=order_id,
                provider=gateway.name,
                provider_order_ref=provider_order_ref,
            ),
            asynchronous=False,
        )

    logger.info("Payment initiated", order_id=order_id, provider=gateway.name, provider_order_ref=provider_order_ref)
    return CheckoutResult(
        order_id=order_id,
        amount=totals.total,
        currency=settings.currency,
        provider=gateway.name,
        provider_order_ref=provider_order_ref,
        key_id=gateway.key_id,
    )


def cancel(order_id, reason="customer_aborted") -> Order:
    """Abandon an unpaid order and return its stock.

    Cancelling an order that is already cancelled, expired or failed is a
    no-op; a completed order cannot be cancelled.
    """
    repo = current_domain.repository_for(Order)
    with order_locks.hold(order_id):
        order = repo.get(str(order_id))
        if order.is_closed:
            return order
        order.ensure_can_transition(OrderStatus.CANCELLED)

        _release_all(order.id, [item.variant_id for item in order.items], reason=reason)
        current_domain.process(CancelOrder(order_id=str(order_id), reason=reason), asynchronous=False)

    logger.info("Order cancelled", order_id=str(order_id), reason=reason)
    return repo.get(str(order_id))


def expire(order_id, as_of: datetime | None = None) -> bool:
    """Expire an unpaid order whose payment deadline has passed.

    Returns False when the order is no longer open or not yet due.
    """
    as_of = as_of or datetime.now(UTC)
    with order_locks.hold(order_id):
        order = current_domain.repository_for(Order).get(str(order_id))
        if not order.is_overdue(as_of):
            return False

        _release_all(order.id, [item.variant_id for item in order.items], reason="expired")
        current_domain.process(ExpireOrder(order_id=str(order_id)), asynchronous=False)

    logger.info("Order expired", order_id=str(order_id), payment_deadline=str(order.payment_deadline))
    return True
