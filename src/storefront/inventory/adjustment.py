"""Stock adjustment — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.inventory.stock import InventoryItem


@storefront.command(part_of="InventoryItem")
class AdjustStock:
    """Administratively correct the on-hand count."""

    inventory_item_id = Identifier(required=True)
    quantity_change = Integer(required=True)  # Can be negative
    reason = String(required=True)
    adjusted_by = String(required=True)


@storefront.command_handler(part_of=InventoryItem)
class StockAdjustmentHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        item.adjust(
            quantity_change=command.quantity_change,
            reason=command.reason,
            adjusted_by=command.adjusted_by,
        )
        repo.add(item)
