"""Inventory ledger — the single entry point for changing stock counters.

Every operation resolves the variant's stock record and runs its command
while holding that variant's lock, so the availability check and the
counter update of one variant can never interleave with another request's.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.inventory.adjustment import AdjustStock
from storefront.inventory.initialization import InitializeStock
from storefront.inventory.projections.inventory_level import InventoryLevel
from storefront.inventory.reservation import (
    CommitReservation,
    ReleaseReservation,
    ReserveStock,
)
from storefront.inventory.stock import DEFAULT_REORDER_POINT, InventoryItem
from storefront.shared.errors import VariantNotFound
from storefront.shared.locks import stock_locks

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StockSnapshot:
    variant_id: str
    sku: str
    on_hand: int
    reserved: int
    available: int


def _inventory_item_id(variant_id) -> str:
    try:
        level = current_domain.repository_for(InventoryLevel).get(str(variant_id))
    except ObjectNotFoundError:
        raise VariantNotFound(variant_id) from None
    return str(level.inventory_item_id)


def open_stock(product_id, variant_id, sku, initial_quantity=0, reorder_point=DEFAULT_REORDER_POINT) -> str:
    """Create the stock record for a new variant."""
    with stock_locks.hold(variant_id):
        return current_domain.process(
            InitializeStock(
                product_id=str(product_id),
                variant_id=str(variant_id),
                sku=sku,
                initial_quantity=initial_quantity,
                reorder_point=reorder_point,
            ),
            asynchronous=False,
        )


def reserve(variant_id, quantity, order_id, expires_at=None) -> None:
    """Hold `quantity` units of a variant for an order.

    Raises InsufficientStock when fewer than `quantity` units are available.
    """
    with stock_locks.hold(variant_id):
        current_domain.process(
            ReserveStock(
                inventory_item_id=_inventory_item_id(variant_id),
                order_id=str(order_id),
                quantity=quantity,
                expires_at=expires_at,
            ),
            asynchronous=False,
        )
    logger.debug("Stock reserved", variant_id=str(variant_id), order_id=str(order_id), quantity=quantity)


def release(variant_id, order_id, reason) -> None:
    """Return an order's held units of a variant to available. Idempotent."""
    with stock_locks.hold(variant_id):
        current_domain.process(
            ReleaseReservation(
                inventory_item_id=_inventory_item_id(variant_id),
                order_id=str(order_id),
                reason=reason,
            ),
            asynchronous=False,
        )
    logger.debug("Reservation released", variant_id=str(variant_id), order_id=str(order_id), reason=reason)


def commit(variant_id, order_id) -> None:
    """Turn an order's hold on a variant into a sale. Idempotent."""
    with stock_locks.hold(variant_id):
        current_domain.process(
            CommitReservation(
                inventory_item_id=_inventory_item_id(variant_id),
                order_id=str(order_id),
            ),
            asynchronous=False,
        )
    logger.debug("Stock committed", variant_id=str(variant_id), order_id=str(order_id))


def adjust(variant_id, delta, reason, adjusted_by="admin") -> StockSnapshot:
    """Administratively change on-hand by `delta`.

    Raises NegativeStock if the change would leave fewer units on hand than
    are currently reserved.
    """
    with stock_locks.hold(variant_id):
        current_domain.process(
            AdjustStock(
                inventory_item_id=_inventory_item_id(variant_id),
                quantity_change=delta,
                reason=reason,
                adjusted_by=adjusted_by,
            ),
            asynchronous=False,
        )
        snapshot = levels(variant_id)
    logger.info(
        "Stock adjusted",
        variant_id=str(variant_id),
        delta=delta,
        on_hand=snapshot.on_hand,
        reserved=snapshot.reserved,
        reason=reason,
    )
    return snapshot


def levels(variant_id) -> StockSnapshot:
    """Current counters for a variant, read from its event stream."""
    item = current_domain.repository_for(InventoryItem).get(_inventory_item_id(variant_id))
    return StockSnapshot(
        variant_id=str(item.variant_id),
        sku=item.sku,
        on_hand=item.on_hand,
        reserved=item.reserved,
        available=item.available,
    )
