"""HMAC-SHA256 signatures as used by the payment provider.

Payment callbacks are signed over ``"{order_ref}|{payment_ref}"`` with the
key secret; webhooks are signed over the raw request body with the webhook
secret. Both are hex-encoded and compared in constant time.
"""

import hashlib
import hmac


def sign(message: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def payment_signature(order_ref: str, payment_ref: str, secret: str) -> str:
    return sign(f"{order_ref}|{payment_ref}".encode(), secret)


def signatures_match(expected: str, provided: str | None) -> bool:
    if not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
