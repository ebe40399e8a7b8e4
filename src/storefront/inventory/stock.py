"""InventoryItem aggregate (Event Sourced) — stock counters for one variant.

All state changes are captured as events and the current state is rebuilt
by replaying them through the @apply handlers.

Stock Level Model:
    on_hand:   Physical count
    reserved:  Held for orders that have not been paid yet
    available: on_hand - reserved (what can still be sold)

Each order holds at most one reservation per variant. Reservations move
ACTIVE → COMMITTED when the order is paid, or ACTIVE → RELEASED when the
checkout is rolled back, cancelled, fails payment or expires.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import apply
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.inventory.events import (
    LowStockDetected,
    ReservationReleased,
    StockAdjusted,
    StockCommitted,
    StockInitialized,
    StockReserved,
)
from storefront.shared.errors import (
    InsufficientStock,
    InvalidInput,
    InvalidQuantity,
    InvalidState,
    NegativeStock,
)

DEFAULT_REORDER_POINT = 5


class ReservationStatus(Enum):
    ACTIVE = "Active"
    COMMITTED = "Committed"
    RELEASED = "Released"


@storefront.value_object(part_of="InventoryItem")
class StockLevels:
    """Tracks the stock counters.

    Available is always on_hand - reserved; it is denormalized here for
    query convenience.
    """

    on_hand = Integer(default=0)
    reserved = Integer(default=0)
    available = Integer(default=0)


@storefront.entity(part_of="InventoryItem")
class Reservation:
    """A hold on stock for one order."""

    order_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    status = String(
        choices=ReservationStatus,
        default=ReservationStatus.ACTIVE.value,
    )
    reserved_at = DateTime(required=True)
    expires_at = DateTime()


@storefront.aggregate(is_event_sourced=True)
class InventoryItem:
    """Event-sourced aggregate tracking stock for one product variant."""

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    sku = String(required=True, max_length=50)
    levels = ValueObject(StockLevels)
    reorder_point = Integer(default=DEFAULT_REORDER_POINT)
    reservations = HasMany(Reservation)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, product_id, variant_id, sku, initial_quantity=0, reorder_point=DEFAULT_REORDER_POINT):
        """Open a stock record for a variant.

        All state is established by the StockInitialized event's @apply handler.
        """
        if initial_quantity < 0:
            raise InvalidQuantity(initial_quantity, minimum=0)

        item = cls._create_new()
        item.raise_(
            StockInitialized(
                inventory_item_id=str(item.id),
                product_id=str(product_id),
                variant_id=str(variant_id),
                sku=sku,
                initial_quantity=initial_quantity,
                reorder_point=reorder_point,
                initialized_at=datetime.now(UTC),
            )
        )
        return item

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def on_hand(self) -> int:
        return self.levels.on_hand if self.levels else 0

    @property
    def reserved(self) -> int:
        return self.levels.reserved if self.levels else 0

    @property
    def available(self) -> int:
        return self.levels.available if self.levels else 0

    def reservation_for(self, order_id):
        return next(
            (r for r in (self.reservations or []) if str(r.order_id) == str(order_id)),
            None,
        )

    def _check_low_stock(self):
        if self.available <= self.reorder_point:
            self.raise_(
                LowStockDetected(
                    inventory_item_id=str(self.id),
                    variant_id=str(self.variant_id),
                    sku=self.sku,
                    current_available=self.available,
                    reorder_point=self.reorder_point,
                    detected_at=datetime.now(UTC),
                )
            )

    # -------------------------------------------------------------------
    # Reservations
    # -------------------------------------------------------------------
    def reserve(self, order_id, quantity, expires_at=None):
        """Hold `quantity` units for an order."""
        if quantity is None or quantity <= 0:
            raise InvalidQuantity(quantity)

        if self.reservation_for(order_id) is not None:
            raise InvalidState(f"Order {order_id} already holds a reservation for {self.sku}")

        available = self.available
        if available < quantity:
            raise InsufficientStock(
                variant_id=str(self.variant_id),
                sku=self.sku,
                available=available,
                requested=quantity,
            )

        self.raise_(
            StockReserved(
                inventory_item_id=str(self.id),
                variant_id=str(self.variant_id),
                reservation_id=str(uuid4()),
                order_id=str(order_id),
                quantity=quantity,
                previous_available=available,
                new_reserved=self.reserved + quantity,
                new_available=available - quantity,
                reserved_at=datetime.now(UTC),
                expires_at=expires_at,
            )
        )
        self._check_low_stock()

    def release(self, order_id, reason) -> bool:
        """Return an order's held units to available.

        Releasing a hold that is no longer active is a no-op and returns False.
        """
        reservation = self.reservation_for(order_id)
        if reservation is None:
            raise InvalidState(f"Order {order_id} holds no reservation for {self.sku}")

        if ReservationStatus(reservation.status) != ReservationStatus.ACTIVE:
            return False

        new_reserved = max(0, self.reserved - reservation.quantity)
        self.raise_(
            ReservationReleased(
                inventory_item_id=str(self.id),
                variant_id=str(self.variant_id),
                reservation_id=str(reservation.id),
                order_id=str(order_id),
                quantity=reservation.quantity,
                reason=reason,
                new_reserved=new_reserved,
                new_available=self.on_hand - new_reserved,
                released_at=datetime.now(UTC),
            )
        )
        return True

    def commit(self, order_id) -> bool:
        """Convert an order's hold into a sale.

        Committing an already committed hold is a no-op and returns False.
        """
        reservation = self.reservation_for(order_id)
        if reservation is None:
            raise InvalidState(f"Order {order_id} holds no reservation for {self.sku}")

        status = ReservationStatus(reservation.status)
        if status == ReservationStatus.COMMITTED:
            return False
        if status == ReservationStatus.RELEASED:
            raise InvalidState(
                f"Reservation for order {order_id} was released and cannot be committed",
                current_state=status.value,
            )

        previous_on_hand = self.on_hand
        previous_reserved = self.reserved
        self.raise_(
            StockCommitted(
                inventory_item_id=str(self.id),
                variant_id=str(self.variant_id),
                reservation_id=str(reservation.id),
                order_id=str(order_id),
                quantity=reservation.quantity,
                previous_on_hand=previous_on_hand,
                new_on_hand=previous_on_hand - reservation.quantity,
                previous_reserved=previous_reserved,
                new_reserved=max(0, previous_reserved - reservation.quantity),
                committed_at=datetime.now(UTC),
            )
        )
        self._check_low_stock()
        return True

    # -------------------------------------------------------------------
    # Stock adjustment
    # -------------------------------------------------------------------
    def adjust(self, quantity_change, reason, adjusted_by):
        """Correct the on-hand count. Never lets on-hand drop below reserved."""
        if not reason:
            raise InvalidInput({"reason": ["Reason is required for stock adjustments"]})
        if not quantity_change:
            raise InvalidInput({"quantity_change": ["Adjustment must change the on-hand count"]})

        previous_on_hand = self.on_hand
        new_on_hand = previous_on_hand + quantity_change
        if new_on_hand < 0 or new_on_hand < self.reserved:
            raise NegativeStock(
                variant_id=str(self.variant_id),
                on_hand=previous_on_hand,
                reserved=self.reserved,
                delta=quantity_change,
            )

        self.raise_(
            StockAdjusted(
                inventory_item_id=str(self.id),
                variant_id=str(self.variant_id),
                quantity_change=quantity_change,
                reason=reason,
                adjusted_by=adjusted_by or "system",
                previous_on_hand=previous_on_hand,
                new_on_hand=new_on_hand,
                new_available=new_on_hand - self.reserved,
                adjusted_at=datetime.now(UTC),
            )
        )
        self._check_low_stock()

    # -------------------------------------------------------------------
    # @apply methods: rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_stock_initialized(self, event: StockInitialized):
        self.id = event.inventory_item_id
        self.product_id = event.product_id
        self.variant_id = event.variant_id
        self.sku = event.sku
        self.reorder_point = event.reorder_point
        self.levels = StockLevels(
            on_hand=event.initial_quantity,
            reserved=0,
            available=event.initial_quantity,
        )
        self.created_at = event.initialized_at
        self.updated_at = event.initialized_at

    @apply
    def _on_stock_reserved(self, event: StockReserved):
        existing = next(
            (r for r in (self.reservations or []) if str(r.id) == str(event.reservation_id)),
            None,
        )
        if not existing:
            self.add_reservations(
                Reservation(
                    id=event.reservation_id,
                    order_id=event.order_id,
                    quantity=event.quantity,
                    reserved_at=event.reserved_at,
                    expires_at=event.expires_at,
                )
            )

        self.levels = StockLevels(
            on_hand=self.on_hand,
            reserved=event.new_reserved,
            available=event.new_available,
        )
        self.updated_at = event.reserved_at

    @apply
    def _on_reservation_released(self, event: ReservationReleased):
        reservation = next(
            (r for r in (self.reservations or []) if str(r.id) == str(event.reservation_id)),
            None,
        )
        if reservation:
            reservation.status = ReservationStatus.RELEASED.value

        self.levels = StockLevels(
            on_hand=self.on_hand,
            reserved=event.new_reserved,
            available=event.new_available,
        )
        self.updated_at = event.released_at

    @apply
    def _on_stock_committed(self, event: StockCommitted):
        reservation = next(
            (r for r in (self.reservations or []) if str(r.id) == str(event.reservation_id)),
            None,
        )
        if reservation:
            reservation.status = ReservationStatus.COMMITTED.value

        self.levels = StockLevels(
            on_hand=event.new_on_hand,
            reserved=event.new_reserved,
            available=event.new_on_hand - event.new_reserved,
        )
        self.updated_at = event.committed_at

    @apply
    def _on_stock_adjusted(self, event: StockAdjusted):
        self.levels = StockLevels(
            on_hand=event.new_on_hand,
            reserved=self.reserved,
            available=event.new_available,
        )
        self.updated_at = event.adjusted_at

    @apply
    def _on_low_stock_detected(self, event: LowStockDetected):  # noqa: ARG002
        # Notification-only event, no state change
        pass
