"""Checkout expiry — command and handler for releasing unpaid orders.

Designed to be triggered periodically by the sweeper process (`server.py`)
or an external scheduler via the maintenance API endpoint. Finds open
orders whose payment deadline has passed and expires each one, returning
its reserved stock. Eventual release within one sweep interval is the
guarantee; no per-order timers are kept.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.fields import DateTime
from protean.utils.globals import current_domain

from storefront.checkout import orchestrator
from storefront.domain import storefront
from storefront.order.order import OPEN_STATUSES, Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ExpireOverdueCheckouts:
    """Expire open orders whose payment deadline is at or before `as_of`."""

    as_of = DateTime()  # Optional: defaults to now


@storefront.command_handler(part_of=Order)
class ExpireOverdueCheckoutsHandler:
    @handle(ExpireOverdueCheckouts)
    def expire_overdue_checkouts(self, command):
        as_of = command.as_of or datetime.now(UTC)

        dao = current_domain.repository_for(Order)._dao
        overdue = [
            order
            for status in OPEN_STATUSES
            for order in dao.query.filter(status=status.value).all().items
            if order.is_overdue(as_of)
        ]

        if not overdue:
            logger.debug("No overdue checkouts found", as_of=as_of.isoformat())
            return 0

        expired_count = 0
        for order in overdue:
            try:
                if orchestrator.expire(order.id, as_of=as_of):
                    expired_count += 1
            except (ValidationError, InvalidOperationError, ObjectNotFoundError) as exc:
                logger.warning(
                    "Failed to expire checkout",
                    order_id=str(order.id),
                    error=str(exc),
                )

        logger.info("Checkout expiry sweep complete", expired_count=expired_count, as_of=as_of.isoformat())
        return expired_count
