"""Storefront bounded context — Catalogue, Inventory, Cart, Checkout and Payments.

Handles the path from a mutable shopping cart, through order creation and
inventory reservation, to payment-provider handoff and verified settlement.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
