"""Configurable fake payment gateway for development and testing.

This adapter simulates the provider without any external calls. It can be
configured at runtime to succeed or fail, and it signs payments and webhooks
with its own test secrets so the full verification path can be exercised:
- Automated tests with predictable outcomes
- Development without real provider credentials
"""

from uuid import uuid4

from storefront.payments.gateway.port import PaymentGateway
from storefront.payments.gateway.signatures import payment_signature, sign, signatures_match
from storefront.shared.errors import ProviderUnavailable


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    name = "fake"

    def __init__(
        self,
        key_id: str = "fake_key",
        key_secret: str = "fake-key-secret",
        webhook_secret: str = "fake-webhook-secret",
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.webhook_secret = webhook_secret
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment provider unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment provider unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_transaction(self, amount: int, currency: str, receipt: str) -> str:
        self.calls.append(
            {
                "method": "create_transaction",
                "amount": amount,
                "currency": currency,
                "receipt": receipt,
            }
        )

        if not self.should_succeed:
            raise ProviderUnavailable(self.failure_reason)
        return f"order_fake{uuid4().hex[:14]}"

    def sign_payment(self, order_ref: str, payment_ref: str) -> str:
        """Produce the signature the provider would hand to the client."""
        return payment_signature(order_ref, payment_ref, self.key_secret)

    def sign_webhook(self, payload: bytes) -> str:
        return sign(payload, self.webhook_secret)

    def verify_payment_signature(self, order_ref: str, payment_ref: str, signature: str) -> bool:
        return signatures_match(self.sign_payment(order_ref, payment_ref), signature)

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        return signatures_match(self.sign_webhook(payload), signature)
