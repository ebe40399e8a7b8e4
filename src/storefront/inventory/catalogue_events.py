"""Inventory reacts to catalogue events.

Every new variant gets its stock record, seeded with the variant's initial
stock, as soon as the variant is added.
"""

import structlog
from protean.utils.mixins import handle

from storefront.catalogue.events import VariantAdded
from storefront.domain import storefront
from storefront.inventory import ledger
from storefront.inventory.stock import InventoryItem

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=InventoryItem, stream_category="storefront::variant")
class CatalogueInventoryEventHandler:
    @handle(VariantAdded)
    def on_variant_added(self, event: VariantAdded) -> None:
        logger.info(
            "Initializing inventory for new variant",
            product_id=str(event.product_id),
            variant_id=str(event.variant_id),
            sku=event.sku,
        )
        ledger.open_stock(
            product_id=event.product_id,
            variant_id=event.variant_id,
            sku=event.sku,
            initial_quantity=event.initial_stock or 0,
        )
