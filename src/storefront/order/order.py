"""Order aggregate (CQRS) — the immutable purchase snapshot taken at checkout.

The order copies every line's SKU, names and unit price at checkout time so
later catalogue edits never change a historical order. After placement only
the payment lifecycle moves it along.

State Machine:
    PENDING_PAYMENT → AWAITING_PAYMENT → COMPLETED
    PENDING_PAYMENT → PAYMENT_FAILED (provider transaction could not be created)
    AWAITING_PAYMENT → PAYMENT_FAILED (provider reported a failed payment)
    PENDING_PAYMENT | AWAITING_PAYMENT → CANCELLED | EXPIRED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import (
    OrderCancelled,
    OrderExpired,
    OrderPlaced,
    PaymentAuthorized,
    PaymentFailed,
    PaymentInitiated,
    PaymentInitiationFailed,
    PaymentSettled,
)
from storefront.shared.errors import InvalidState


class OrderStatus(Enum):
    PENDING_PAYMENT = "Pending_Payment"
    AWAITING_PAYMENT = "Awaiting_Payment"
    COMPLETED = "Completed"
    PAYMENT_FAILED = "Payment_Failed"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"


class PaymentStatus(Enum):
    PENDING = "Pending"
    AUTHORIZED = "Authorized"
    PAID = "Paid"
    FAILED = "Failed"
    VOIDED = "Voided"


class CheckoutState(Enum):
    INITIATED = "Initiated"
    RESERVED = "Reserved"
    AWAITING_PAYMENT = "AwaitingPayment"
    SETTLED = "Settled"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING_PAYMENT: {
        OrderStatus.AWAITING_PAYMENT,
        OrderStatus.PAYMENT_FAILED,
        OrderStatus.CANCELLED,
        OrderStatus.EXPIRED,
    },
    OrderStatus.AWAITING_PAYMENT: {
        OrderStatus.COMPLETED,
        OrderStatus.PAYMENT_FAILED,
        OrderStatus.CANCELLED,
        OrderStatus.EXPIRED,
    },
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.PAYMENT_FAILED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.EXPIRED: set(),  # Terminal
}

# Orders still holding stock reservations
OPEN_STATUSES = (OrderStatus.PENDING_PAYMENT, OrderStatus.AWAITING_PAYMENT)

# Closed without a sale; their reservations have been released
_CLOSED_STATUSES = {OrderStatus.PAYMENT_FAILED, OrderStatus.CANCELLED, OrderStatus.EXPIRED}

_CHECKOUT_STATES = {
    OrderStatus.PENDING_PAYMENT: CheckoutState.RESERVED,
    OrderStatus.AWAITING_PAYMENT: CheckoutState.AWAITING_PAYMENT,
    OrderStatus.COMPLETED: CheckoutState.SETTLED,
    OrderStatus.PAYMENT_FAILED: CheckoutState.CANCELLED,
    OrderStatus.CANCELLED: CheckoutState.CANCELLED,
    OrderStatus.EXPIRED: CheckoutState.EXPIRED,
}


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so they compare with stored deadlines."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@storefront.value_object(part_of="Order")
class Customer:
    """Contact details captured at checkout."""

    name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    email = String(max_length=254)


@storefront.value_object(part_of="Order")
class ShippingAddress:
    """The delivery address captured at checkout. Immutable once recorded."""

    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Totals in integer minor units, locked at checkout."""

    subtotal = Integer(default=0)
    shipping = Integer(default=0)
    tax = Integer(default=0)
    total = Integer(default=0)
    currency = String(max_length=3, default="INR")


@storefront.entity(part_of="Order")
class OrderItem:
    """A line of the order, frozen at checkout."""

    variant_id = Identifier(required=True)
    sku = String(required=True, max_length=50)
    product_name = String(required=True, max_length=255)
    variant_title = String(required=True, max_length=255)
    unit_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    line_total = Integer(required=True, min_value=0)


@storefront.aggregate
class Order:
    cart_id = Identifier()
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING_PAYMENT.value,
    )
    payment_status = String(
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    items = HasMany(OrderItem)
    customer = ValueObject(Customer)
    shipping_address = ValueObject(ShippingAddress)
    pricing = ValueObject(OrderPricing)
    provider = String(max_length=50)
    provider_order_ref = String(max_length=255)
    provider_payment_ref = String(max_length=255)
    payment_deadline = DateTime()
    failure_reason = String(max_length=500)
    cancellation_reason = String(max_length=500)
    placed_at = DateTime()
    settled_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, order_id, cart_id, items_data, customer, shipping_address, pricing, payment_deadline):
        """Create the order snapshot.

        Args:
            order_id: Pre-generated identity, shared with the stock reservations.
            items_data: List of dicts with variant_id, sku, product_name,
                        variant_title, unit_price, quantity, line_total.
            customer: Dict with name, phone and optional email.
            shipping_address: Dict with line1, line2, city, state, postal_code, country.
            pricing: Dict with subtotal, shipping, tax, total, currency.
        """
        now = datetime.now(UTC)
        order = cls(
            id=order_id,
            cart_id=cart_id,
            customer=Customer(**customer),
            shipping_address=ShippingAddress(**shipping_address),
            pricing=OrderPricing(**pricing),
            payment_deadline=payment_deadline,
            placed_at=now,
            updated_at=now,
        )
        for item in items_data:
            order.add_items(OrderItem(**item))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                cart_id=str(cart_id) if cart_id else None,
                items=json.dumps(items_data),
                subtotal=order.pricing.subtotal,
                shipping=order.pricing.shipping,
                tax=order.pricing.tax,
                total=order.pricing.total,
                currency=order.pricing.currency,
                payment_deadline=payment_deadline,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State helpers
    # -------------------------------------------------------------------
    @property
    def is_settled(self) -> bool:
        return self.status == OrderStatus.COMPLETED.value

    @property
    def is_open(self) -> bool:
        return OrderStatus(self.status) in OPEN_STATUSES

    @property
    def is_closed(self) -> bool:
        return OrderStatus(self.status) in _CLOSED_STATUSES

    @property
    def checkout_state(self) -> CheckoutState:
        return _CHECKOUT_STATES[OrderStatus(self.status)]

    def is_overdue(self, as_of: datetime) -> bool:
        return (
            self.is_open
            and self.payment_deadline is not None
            and as_utc(self.payment_deadline) <= as_utc(as_of)
        )

    def ensure_can_transition(self, target_status: OrderStatus):
        """Raise InvalidState unless the current status allows moving to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState(
                f"Cannot transition from {current.value} to {target_status.value}",
                current_state=current.value,
            )

    # -------------------------------------------------------------------
    # Payment lifecycle
    # -------------------------------------------------------------------
    def record_provider_transaction(self, provider, provider_order_ref):
        """The provider accepted the transaction; the customer can now pay."""
        self.ensure_can_transition(OrderStatus.AWAITING_PAYMENT)
        now = datetime.now(UTC)
        self.status = OrderStatus.AWAITING_PAYMENT.value
        self.provider = provider
        self.provider_order_ref = provider_order_ref
        self.updated_at = now

        self.raise_(
            PaymentInitiated(
                order_id=str(self.id),
                provider=provider,
                provider_order_ref=provider_order_ref,
                amount=self.pricing.total,
                currency=self.pricing.currency,
                initiated_at=now,
            )
        )

    def record_initiation_failure(self, reason):
        """The provider transaction could not be created."""
        self.ensure_can_transition(OrderStatus.PAYMENT_FAILED)
        now = datetime.now(UTC)
        self.status = OrderStatus.PAYMENT_FAILED.value
        self.payment_status = PaymentStatus.FAILED.value
        self.failure_reason = reason
        self.updated_at = now

        self.raise_(
            PaymentInitiationFailed(
                order_id=str(self.id),
                reason=reason,
                failed_at=now,
            )
        )

    def record_authorization(self, provider_payment_ref) -> bool:
        """The provider authorized the payment. Stock is untouched until settlement."""
        if OrderStatus(self.status) != OrderStatus.AWAITING_PAYMENT:
            return False
        if self.payment_status == PaymentStatus.AUTHORIZED.value:
            return False

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.AUTHORIZED.value
        self.provider_payment_ref = provider_payment_ref
        self.updated_at = now

        self.raise_(
            PaymentAuthorized(
                order_id=str(self.id),
                provider_order_ref=self.provider_order_ref,
                provider_payment_ref=provider_payment_ref,
                authorized_at=now,
            )
        )
        return True

    def settle(self, provider_payment_ref) -> bool:
        """Mark the order paid. Settling a settled order is a no-op."""
        if self.is_settled:
            return False
        self.ensure_can_transition(OrderStatus.COMPLETED)

        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.payment_status = PaymentStatus.PAID.value
        self.provider_payment_ref = provider_payment_ref
        self.settled_at = now
        self.updated_at = now

        self.raise_(
            PaymentSettled(
                order_id=str(self.id),
                provider_order_ref=self.provider_order_ref,
                provider_payment_ref=provider_payment_ref,
                amount=self.pricing.total,
                currency=self.pricing.currency,
                settled_at=now,
            )
        )
        return True

    def fail_payment(self, provider_payment_ref, reason) -> bool:
        """The provider reported the payment as failed."""
        if self.is_closed:
            return False
        self.ensure_can_transition(OrderStatus.PAYMENT_FAILED)

        now = datetime.now(UTC)
        self.status = OrderStatus.PAYMENT_FAILED.value
        self.payment_status = PaymentStatus.FAILED.value
        self.provider_payment_ref = provider_payment_ref
        self.failure_reason = reason
        self.updated_at = now

        self.raise_(
            PaymentFailed(
                order_id=str(self.id),
                provider_order_ref=self.provider_order_ref,
                provider_payment_ref=provider_payment_ref,
                reason=reason,
                failed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Cancellation and expiry
    # -------------------------------------------------------------------
    def cancel(self, reason) -> bool:
        """Void the order. Cancelling an order that is already closed is a no-op."""
        if self.is_closed:
            return False
        self.ensure_can_transition(OrderStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.payment_status = PaymentStatus.VOIDED.value
        self.cancellation_reason = reason
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                reason=reason,
                cancelled_at=now,
            )
        )
        return True

    def expire(self) -> bool:
        """Close an unpaid order whose payment deadline passed."""
        if self.is_closed:
            return False
        self.ensure_can_transition(OrderStatus.EXPIRED)

        now = datetime.now(UTC)
        self.status = OrderStatus.EXPIRED.value
        self.payment_status = PaymentStatus.VOIDED.value
        self.updated_at = now

        self.raise_(
            OrderExpired(
                order_id=str(self.id),
                payment_deadline=self.payment_deadline,
                expired_at=now,
            )
        )
        return True
