"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order snapshot was taken from a cart whose stock is now reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    cart_id = Identifier()
    items = Text(required=True)  # JSON list of line snapshots
    subtotal = Integer(required=True)
    shipping = Integer(required=True)
    tax = Integer(required=True)
    total = Integer(required=True)
    currency = String(required=True)
    payment_deadline = DateTime()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentInitiated:
    """The payment provider accepted a transaction for the order total."""

    __version__ = 1

    order_id = Identifier(required=True)
    provider = String(required=True)
    provider_order_ref = String(required=True)
    amount = Integer(required=True)
    currency = String(required=True)
    initiated_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentInitiationFailed:
    """The payment provider could not create a transaction."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True)
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentAuthorized:
    __version__ = 1

    order_id = Identifier(required=True)
    provider_order_ref = String(required=True)
    provider_payment_ref = String(required=True)
    authorized_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentSettled:
    """Payment was verified and the reserved stock committed."""

    __version__ = 1

    order_id = Identifier(required=True)
    provider_order_ref = String(required=True)
    provider_payment_ref = String(required=True)
    amount = Integer(required=True)
    currency = String(required=True)
    settled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    provider_order_ref = String()
    provider_payment_ref = String()
    reason = String(required=True)
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The customer abandoned payment; reservations were released."""

    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderExpired:
    """The payment deadline passed without settlement; reservations were released."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_deadline = DateTime()
    expired_at = DateTime(required=True)
