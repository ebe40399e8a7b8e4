"""Stock reservation — commands and handler."""

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.inventory.stock import InventoryItem


@storefront.command(part_of="InventoryItem")
class ReserveStock:
    """Hold stock for an order."""

    inventory_item_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Integer(required=True)
    expires_at = DateTime()


@storefront.command(part_of="InventoryItem")
class ReleaseReservation:
    """Release an order's hold on stock."""

    inventory_item_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = String(required=True)


@storefront.command(part_of="InventoryItem")
class CommitReservation:
    """Turn an order's hold into a permanent stock decrement."""

    inventory_item_id = Identifier(required=True)
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=InventoryItem)
class ReservationHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        item.reserve(
            order_id=command.order_id,
            quantity=command.quantity,
            expires_at=command.expires_at,
        )
        repo.add(item)

    @handle(ReleaseReservation)
    def release_reservation(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        if item.release(order_id=command.order_id, reason=command.reason):
            repo.add(item)

    @handle(CommitReservation)
    def commit_reservation(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        if item.commit(order_id=command.order_id):
            repo.add(item)
