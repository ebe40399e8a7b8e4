"""Stock initialization — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.inventory.stock import DEFAULT_REORDER_POINT, InventoryItem


@storefront.command(part_of="InventoryItem")
class InitializeStock:
    """Open a stock record for a variant."""

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    sku = String(required=True, max_length=50)
    initial_quantity = Integer(default=0)
    reorder_point = Integer(default=DEFAULT_REORDER_POINT)


@storefront.command_handler(part_of=InventoryItem)
class InitializeStockHandler:
    @handle(InitializeStock)
    def initialize_stock(self, command):
        item = InventoryItem.create(
            product_id=command.product_id,
            variant_id=command.variant_id,
            sku=command.sku,
            initial_quantity=command.initial_quantity or 0,
            reorder_point=DEFAULT_REORDER_POINT if command.reorder_point is None else command.reorder_point,
        )
        current_domain.repository_for(InventoryItem).add(item)
        return str(item.id)
