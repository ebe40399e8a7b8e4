"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CatalogueState:
    """Variants seeded by a simulated merchandiser."""

    product_id: str | None = None
    variant_ids: list[str] = field(default_factory=list)


@dataclass
class ShopperState:
    """Tracks a single simulated shopper from cart to payment."""

    cart_id: str | None = None
    variant_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    provider_order_ref: str | None = None
    amount: int = 0
