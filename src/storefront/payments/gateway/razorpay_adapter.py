"""Razorpay payment gateway adapter.

Creates provider orders over the Razorpay REST API and verifies the HMAC
signatures Razorpay attaches to payment callbacks and webhooks.
"""

import httpx
import structlog

from storefront.payments.gateway.port import PaymentGateway
from storefront.payments.gateway.signatures import payment_signature, sign, signatures_match
from storefront.shared.errors import ProviderUnavailable

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    """Production Razorpay adapter."""

    name = "razorpay"

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        webhook_secret: str = "",
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.key_id = key_id
        self.key_secret = key_secret
        self.webhook_secret = webhook_secret
        self._client = httpx.Client(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            transport=transport,
        )

    def create_transaction(self, amount: int, currency: str, receipt: str) -> str:
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }
        try:
            response = self._client.post("/orders", json=payload)
        except httpx.HTTPError as exc:
            logger.error("Razorpay request failed", receipt=receipt, error=str(exc))
            raise ProviderUnavailable(f"Payment provider request failed: {exc}") from exc

        if response.is_error:
            logger.error(
                "Razorpay rejected order creation",
                receipt=receipt,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ProviderUnavailable(f"Payment provider returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            body = None
        provider_order_ref = body.get("id") if isinstance(body, dict) else None
        if not provider_order_ref or not isinstance(provider_order_ref, str):
            raise ProviderUnavailable("Payment provider returned no order id")

        logger.info("Razorpay order created", receipt=receipt, provider_order_ref=provider_order_ref)
        return provider_order_ref

    def verify_payment_signature(self, order_ref: str, payment_ref: str, signature: str) -> bool:
        return signatures_match(payment_signature(order_ref, payment_ref, self.key_secret), signature)

    def verify_webhook_signature(self, payload: bytes, signature: str) -> bool:
        if not self.webhook_secret:
            logger.warning("Webhook received but no webhook secret is configured")
            return False
        return signatures_match(sign(payload, self.webhook_secret), signature)

    def close(self) -> None:
        self._client.close()
