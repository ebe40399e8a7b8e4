"""FastAPI routes for store administration — catalogue, stock, orders, maintenance.

Authentication of the admin surface is handled outside this service.
"""

from dataclasses import asdict

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddVariantRequest,
    AdjustInventoryRequest,
    CreateProductRequest,
    ExpireCheckoutsRequest,
    ExpireCheckoutsResponse,
    OrderDetailResponse,
    OrderItemResponse,
    OrderSummaryResponse,
    ProductIdResponse,
    ShippingAddressSchema,
    StatusResponse,
    StockLevelsResponse,
    UpdateProductRequest,
    UpdateVariantRequest,
    VariantIdResponse,
)
from storefront.catalogue.management import CreateProduct, UpdateProduct
from storefront.catalogue.variants import AddVariant, UpdateVariant
from storefront.checkout.expiry import ExpireOverdueCheckouts
from storefront.inventory import ledger
from storefront.order.order import Order, as_utc

admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _order_summary(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "status": order.status,
        "payment_status": order.payment_status,
        "total": order.pricing.total,
        "currency": order.pricing.currency,
        "customer_name": order.customer.name,
        "placed_at": order.placed_at,
    }


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        slug=body.slug,
        description=body.description,
        status=body.status,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@admin_router.put("/products/{product_id}", response_model=StatusResponse)
def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        slug=body.slug,
        description=body.description,
        status=body.status,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.post("/products/{product_id}/variants", status_code=201, response_model=VariantIdResponse)
def add_variant(product_id: str, body: AddVariantRequest) -> VariantIdResponse:
    command = AddVariant(
        product_id=product_id,
        sku=body.sku,
        title=body.title,
        size=body.size,
        color=body.color,
        price=body.price,
        compare_at_price=body.compare_at_price,
        initial_stock=body.initial_stock,
    )
    result = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=result)


@admin_router.put("/variants/{variant_id}", response_model=StatusResponse)
def update_variant(variant_id: str, body: UpdateVariantRequest) -> StatusResponse:
    command = UpdateVariant(
        variant_id=variant_id,
        title=body.title,
        size=body.size,
        color=body.color,
        price=body.price,
        compare_at_price=body.compare_at_price,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
@admin_router.post("/inventory/adjust", response_model=StockLevelsResponse)
def adjust_inventory(body: AdjustInventoryRequest) -> StockLevelsResponse:
    snapshot = ledger.adjust(body.variant_id, body.delta, reason=body.reason, adjusted_by=body.adjusted_by)
    return StockLevelsResponse(**asdict(snapshot))


@admin_router.get("/inventory/{variant_id}", response_model=StockLevelsResponse)
def get_inventory(variant_id: str) -> StockLevelsResponse:
    return StockLevelsResponse(**asdict(ledger.levels(variant_id)))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@admin_router.get("/orders", response_model=list[OrderSummaryResponse])
def list_orders(limit: int = Query(default=50, ge=1, le=200)) -> list[OrderSummaryResponse]:
    orders = current_domain.repository_for(Order)._dao.query.all().items
    orders = sorted(orders, key=lambda o: as_utc(o.placed_at), reverse=True)[:limit]
    return [OrderSummaryResponse(**_order_summary(order)) for order in orders]


@admin_router.get("/orders/{order_id}", response_model=OrderDetailResponse)
def get_order(order_id: str) -> OrderDetailResponse:
    order = current_domain.repository_for(Order).get(order_id)
    address = order.shipping_address
    return OrderDetailResponse(
        **_order_summary(order),
        subtotal=order.pricing.subtotal,
        shipping=order.pricing.shipping,
        tax=order.pricing.tax,
        customer_phone=order.customer.phone,
        customer_email=order.customer.email,
        shipping_address=ShippingAddressSchema(
            line1=address.line1,
            line2=address.line2,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
        ),
        items=[
            OrderItemResponse(
                variant_id=str(item.variant_id),
                sku=item.sku,
                product_name=item.product_name,
                variant_title=item.variant_title,
                unit_price=item.unit_price,
                quantity=item.quantity,
                line_total=item.line_total,
            )
            for item in order.items
        ],
        provider=order.provider,
        provider_order_ref=order.provider_order_ref,
        provider_payment_ref=order.provider_payment_ref,
        payment_deadline=order.payment_deadline,
    )


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------
@admin_router.post("/maintenance/expire-checkouts", response_model=ExpireCheckoutsResponse)
def expire_checkouts(body: ExpireCheckoutsRequest | None = None) -> ExpireCheckoutsResponse:
    command = ExpireOverdueCheckouts(as_of=body.as_of if body else None)
    result = current_domain.process(command, asynchronous=False)
    return ExpireCheckoutsResponse(expired_count=result or 0)
