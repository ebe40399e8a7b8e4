"""FastAPI routes for the customer-facing flow — carts, checkout and payments.

Core calls block on keyed locks and provider HTTP, so routes are plain
functions that FastAPI runs in its threadpool.
"""

from dataclasses import asdict

from fastapi import APIRouter, Header, Request
from fastapi.concurrency import run_in_threadpool

from storefront.api.schemas import (
    CancelOrderRequest,
    CartLineResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    CreateCartRequest,
    OrderStatusResponse,
    UpsertCartItemRequest,
    VerifyPaymentRequest,
    WebhookResponse,
)
from storefront.cart import engine
from storefront.cart.summary import CartSummary
from storefront.checkout import orchestrator
from storefront.checkout.orchestrator import CustomerDetails, ShippingDetails
from storefront.payments import verifier


def _cart_response(summary: CartSummary) -> CartResponse:
    return CartResponse(
        cart_id=summary.cart_id,
        status=summary.status,
        currency=summary.currency,
        lines=[CartLineResponse(**asdict(line)) for line in summary.lines],
        subtotal=summary.subtotal,
        item_count=summary.item_count,
    )


def _order_status_response(order) -> OrderStatusResponse:
    return OrderStatusResponse(
        order_id=str(order.id),
        status=order.status,
        payment_status=order.payment_status,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=CartResponse)
def create_cart(body: CreateCartRequest | None = None) -> CartResponse:
    return _cart_response(engine.create_cart(session_id=body.session_id if body else None))


@cart_router.get("/{cart_id}", response_model=CartResponse)
def get_cart(cart_id: str) -> CartResponse:
    return _cart_response(engine.read_cart(cart_id))


@cart_router.put("/{cart_id}/items/{variant_id}", response_model=CartResponse)
def upsert_cart_item(cart_id: str, variant_id: str, body: UpsertCartItemRequest) -> CartResponse:
    return _cart_response(engine.upsert_item(cart_id, variant_id, body.quantity))


@cart_router.delete("/{cart_id}/items/{variant_id}", response_model=CartResponse)
def remove_cart_item(cart_id: str, variant_id: str) -> CartResponse:
    return _cart_response(engine.remove_item(cart_id, variant_id))


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(tags=["checkout"])


@checkout_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
def checkout(body: CheckoutRequest) -> CheckoutResponse:
    result = orchestrator.checkout(
        body.cart_id,
        customer=CustomerDetails(**body.customer.model_dump()),
        shipping_address=ShippingDetails(**body.shipping_address.model_dump()),
    )
    return CheckoutResponse(**asdict(result))


@checkout_router.post("/orders/{order_id}/cancel", response_model=OrderStatusResponse)
def cancel_order(order_id: str, body: CancelOrderRequest | None = None) -> OrderStatusResponse:
    reason = body.reason if body else CancelOrderRequest().reason
    return _order_status_response(orchestrator.cancel(order_id, reason=reason))


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/verify", response_model=OrderStatusResponse)
def verify_payment(body: VerifyPaymentRequest) -> OrderStatusResponse:
    order = verifier.verify(body.provider_order_ref, body.provider_payment_ref, body.signature)
    return _order_status_response(order)


@payment_router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(
    request: Request,
    x_razorpay_signature: str = Header(default=""),
) -> WebhookResponse:
    """Process a signed payment-provider webhook. Non-2xx responses make the provider retry."""
    payload = await request.body()
    outcome = await run_in_threadpool(verifier.handle_webhook, payload, x_razorpay_signature)
    return WebhookResponse(outcome=outcome)
