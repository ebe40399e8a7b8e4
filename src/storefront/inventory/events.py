"""Domain events for the InventoryItem aggregate.

Every event carries the resulting stock counters so that replay and the
inventory projection never have to recompute them.
"""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="InventoryItem")
class StockInitialized:
    """A stock record was opened for a variant."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    sku = String(required=True)
    initial_quantity = Integer(required=True)
    reorder_point = Integer(required=True)
    initialized_at = DateTime(required=True)


@storefront.event(part_of="InventoryItem")
class StockReserved:
    """Units were held for an order, decreasing available quantity."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    reservation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_available = Integer(required=True)
    new_reserved = Integer(required=True)
    new_available = Integer(required=True)
    reserved_at = DateTime(required=True)
    expires_at = DateTime()


@storefront.event(part_of="InventoryItem")
class ReservationReleased:
    """An order's hold was released, returning its units to available."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    reservation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(required=True)  # customer_aborted, checkout_rolled_back, payment_failed, expired
    new_reserved = Integer(required=True)
    new_available = Integer(required=True)
    released_at = DateTime(required=True)


@storefront.event(part_of="InventoryItem")
class StockCommitted:
    """A paid order's hold was converted into a sale, reducing on-hand."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    reservation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_on_hand = Integer(required=True)
    new_on_hand = Integer(required=True)
    previous_reserved = Integer(required=True)
    new_reserved = Integer(required=True)
    committed_at = DateTime(required=True)


@storefront.event(part_of="InventoryItem")
class StockAdjusted:
    """An operator corrected the on-hand count."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity_change = Integer(required=True)
    reason = String(required=True)
    adjusted_by = String(required=True)
    previous_on_hand = Integer(required=True)
    new_on_hand = Integer(required=True)
    new_available = Integer(required=True)
    adjusted_at = DateTime(required=True)


@storefront.event(part_of="InventoryItem")
class LowStockDetected:
    """Available stock fell to or below the reorder point."""

    __version__ = 1

    inventory_item_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    sku = String(required=True)
    current_available = Integer(required=True)
    reorder_point = Integer(required=True)
    detected_at = DateTime(required=True)
