"""Inventory level — per-variant stock counters for reads and lookups."""

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.inventory.events import (
    ReservationReleased,
    StockAdjusted,
    StockCommitted,
    StockInitialized,
    StockReserved,
)
from storefront.inventory.stock import InventoryItem


@storefront.projection
class InventoryLevel:
    variant_id = Identifier(identifier=True, required=True)
    inventory_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    sku = String(required=True)
    on_hand = Integer(default=0)
    reserved = Integer(default=0)
    available = Integer(default=0)
    reorder_point = Integer(default=0)
    updated_at = DateTime()


@storefront.projector(projector_for=InventoryLevel, aggregates=[InventoryItem])
class InventoryLevelProjector:
    @on(StockInitialized)
    def on_stock_initialized(self, event):
        current_domain.repository_for(InventoryLevel).add(
            InventoryLevel(
                variant_id=event.variant_id,
                inventory_item_id=event.inventory_item_id,
                product_id=event.product_id,
                sku=event.sku,
                on_hand=event.initial_quantity,
                reserved=0,
                available=event.initial_quantity,
                reorder_point=event.reorder_point,
                updated_at=event.initialized_at,
            )
        )

    @on(StockReserved)
    def on_stock_reserved(self, event):
        repo = current_domain.repository_for(InventoryLevel)
        level = repo.get(event.variant_id)
        level.reserved = event.new_reserved
        level.available = event.new_available
        level.updated_at = event.reserved_at
        repo.add(level)

    @on(ReservationReleased)
    def on_reservation_released(self, event):
        repo = current_domain.repository_for(InventoryLevel)
        level = repo.get(event.variant_id)
        level.reserved = event.new_reserved
        level.available = event.new_available
        level.updated_at = event.released_at
        repo.add(level)

    @on(StockCommitted)
    def on_stock_committed(self, event):
        repo = current_domain.repository_for(InventoryLevel)
        level = repo.get(event.variant_id)
        level.on_hand = event.new_on_hand
        level.reserved = event.new_reserved
        level.available = event.new_on_hand - event.new_reserved
        level.updated_at = event.committed_at
        repo.add(level)

    @on(StockAdjusted)
    def on_stock_adjusted(self, event):
        repo = current_domain.repository_for(InventoryLevel)
        level = repo.get(event.variant_id)
        level.on_hand = event.new_on_hand
        level.available = event.new_available
        level.updated_at = event.adjusted_at
        repo.add(level)
