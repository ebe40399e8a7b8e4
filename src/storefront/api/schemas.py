"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Amounts are integer minor currency units.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class CustomerSchema(BaseModel):
    name: str
    phone: str
    email: str | None = None


class ShippingAddressSchema(BaseModel):
    line1: str
    line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    session_id: str | None = None


class UpsertCartItemRequest(BaseModel):
    quantity: int

    model_config = {"json_schema_extra": {"examples": [{"quantity": 2}]}}


class CartLineResponse(BaseModel):
    variant_id: str
    sku: str
    product_name: str
    variant_title: str
    unit_price: int
    quantity: int
    line_total: int


class CartResponse(BaseModel):
    cart_id: str
    status: str
    currency: str
    lines: list[CartLineResponse]
    subtotal: int
    item_count: int


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    cart_id: str
    customer: CustomerSchema
    shipping_address: ShippingAddressSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cart_id": "0b6c1f9e-0000-4000-8000-000000000001",
                    "customer": {"name": "Asha Rao", "phone": "+919800000000", "email": "asha@example.com"},
                    "shipping_address": {
                        "line1": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "KA",
                        "postal_code": "560001",
                        "country": "IN",
                    },
                }
            ]
        }
    }


class CheckoutResponse(BaseModel):
    order_id: str
    amount: int
    currency: str
    provider: str
    provider_order_ref: str
    key_id: str


class CancelOrderRequest(BaseModel):
    reason: str = "customer_aborted"


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str
    payment_status: str


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class VerifyPaymentRequest(BaseModel):
    provider_order_ref: str = Field(
        default="",
        validation_alias=AliasChoices("provider_order_ref", "razorpay_order_id"),
    )
    provider_payment_ref: str = Field(
        default="",
        validation_alias=AliasChoices("provider_payment_ref", "razorpay_payment_id"),
    )
    signature: str = Field(
        default="",
        validation_alias=AliasChoices("signature", "razorpay_signature"),
    )


class WebhookResponse(BaseModel):
    status: str = "ok"
    outcome: str


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str
    slug: str | None = None
    description: str | None = None
    status: str | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    status: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class AddVariantRequest(BaseModel):
    sku: str
    title: str
    size: str | None = None
    color: str | None = None
    price: int = Field(ge=0)
    compare_at_price: int | None = Field(default=None, ge=0)
    initial_stock: int = Field(default=0, ge=0)


class UpdateVariantRequest(BaseModel):
    title: str | None = None
    size: str | None = None
    color: str | None = None
    price: int | None = Field(default=None, ge=0)
    compare_at_price: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class VariantIdResponse(BaseModel):
    variant_id: str


class AdjustInventoryRequest(BaseModel):
    variant_id: str
    delta: int
    reason: str = "manual adjustment"
    adjusted_by: str = "admin"


class StockLevelsResponse(BaseModel):
    variant_id: str
    sku: str
    on_hand: int
    reserved: int
    available: int


class OrderItemResponse(BaseModel):
    variant_id: str
    sku: str
    product_name: str
    variant_title: str
    unit_price: int
    quantity: int
    line_total: int


class OrderSummaryResponse(BaseModel):
    order_id: str
    status: str
    payment_status: str
    total: int
    currency: str
    customer_name: str
    placed_at: datetime | None = None


class OrderDetailResponse(OrderSummaryResponse):
    subtotal: int
    shipping: int
    tax: int
    customer_phone: str
    customer_email: str | None = None
    shipping_address: ShippingAddressSchema
    items: list[OrderItemResponse]
    provider: str | None = None
    provider_order_ref: str | None = None
    provider_payment_ref: str | None = None
    payment_deadline: datetime | None = None


class ExpireCheckoutsRequest(BaseModel):
    as_of: datetime | None = None


class ExpireCheckoutsResponse(BaseModel):
    expired_count: int
