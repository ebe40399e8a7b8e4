"""Typed domain errors raised across the storefront.

All errors extend Protean's ``ValidationError`` so they propagate out of
command handlers unchanged and carry a field → messages mapping that the API
layer can render. Each class adds the attributes a caller needs to react
without parsing messages.
"""

from protean.exceptions import ValidationError


class StorefrontError(ValidationError):
    """Base for all typed storefront errors."""

    code = "storefront_error"

    def __init__(self, messages: dict | None = None, **kwargs):
        super().__init__(messages or {"_entity": [self.code]}, **kwargs)


class InvalidInput(StorefrontError):
    code = "invalid_input"


class InvalidQuantity(StorefrontError):
    code = "invalid_quantity"

    def __init__(self, quantity, minimum: int = 1, maximum: int | None = None):
        self.quantity = quantity
        self.minimum = minimum
        self.maximum = maximum
        bound = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        super().__init__({"quantity": [f"Quantity must be {bound}, got {quantity}"]})


class CartNotOpen(StorefrontError):
    code = "cart_not_open"

    def __init__(self, cart_id, status: str):
        self.cart_id = cart_id
        self.status = status
        super().__init__({"cart": [f"Cart {cart_id} is {status} and can no longer be modified"]})


class VariantNotFound(StorefrontError):
    code = "variant_not_found"

    def __init__(self, variant_id):
        self.variant_id = variant_id
        super().__init__({"variant_id": [f"Variant {variant_id} does not exist"]})


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"

    def __init__(self, variant_id, sku: str, available: int, requested: int):
        self.variant_id = variant_id
        self.sku = sku
        self.available = available
        self.requested = requested
        super().__init__(
            {"quantity": [f"Insufficient stock for {sku}: requested {requested}, available {available}"]}
        )


class NegativeStock(StorefrontError):
    code = "negative_stock"

    def __init__(self, variant_id, on_hand: int, reserved: int, delta: int):
        self.variant_id = variant_id
        self.on_hand = on_hand
        self.reserved = reserved
        self.delta = delta
        super().__init__(
            {
                "quantity_change": [
                    f"Adjustment of {delta} would leave {on_hand + delta} on hand "
                    f"with {reserved} reserved"
                ]
            }
        )


class InvalidState(StorefrontError):
    code = "invalid_state"

    def __init__(self, message: str, current_state: str | None = None):
        self.current_state = current_state
        super().__init__({"status": [message]})


class InvalidSignature(StorefrontError):
    code = "invalid_signature"

    def __init__(self):
        super().__init__({"signature": ["Signature verification failed"]})


class UnknownTransaction(StorefrontError):
    code = "unknown_transaction"

    def __init__(self, provider_order_ref: str):
        self.provider_order_ref = provider_order_ref
        super().__init__({"provider_order_ref": ["No order matches the provider reference"]})


class ProviderUnavailable(StorefrontError):
    code = "provider_unavailable"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__({"provider": [reason]})
