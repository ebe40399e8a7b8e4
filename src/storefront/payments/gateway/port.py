"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement, so
checkout and payment verification never depend on a specific provider.
"""

from abc import ABC, abstractmethod


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    #: Provider name recorded on orders.
    name: str = "gateway"

    #: Public key handed to the client so it can open the provider's payment flow.
    key_id: str = ""

    @abstractmethod
    def create_transaction(self, amount: int, currency: str, receipt: str) -> str:
        """Create a provider transaction for `amount` minor units and return its reference.

        Raises ProviderUnavailable when the provider cannot be reached or
        rejects the request.
        """
        ...

    @abstractmethod
    def verify_payment_signature(self, order_ref: str, payment_ref: str, signature: str) -> bool:
        """Check the signature the client relays after completing payment."""
        ...

    @abstractmethod
    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        """Check that a webhook body was sent by the provider."""
        ...
