import pytest
from storefront.inventory.events import (
    LowStockDetected,
    ReservationReleased,
    StockAdjusted,
    StockCommitted,
    StockInitialized,
    StockReserved,
)
from storefront.inventory.stock import InventoryItem, ReservationStatus
from storefront.shared.errors import (
    InsufficientStock,
    InvalidInput,
    InvalidQuantity,
    InvalidState,
    NegativeStock,
)


def _item(on_hand=10, reorder_point=2):
    return InventoryItem.create(
        product_id="prod-001",
        variant_id="var-001",
        sku="TEE-BLK-M",
        initial_quantity=on_hand,
        reorder_point=reorder_point,
    )


def _assert_counters(item, on_hand, reserved):
    assert item.on_hand == on_hand
    assert item.reserved == reserved
    assert item.available == on_hand - reserved


class TestInitialization:
    def test_counters_start_from_initial_quantity(self):
        item = _item(on_hand=10)
        _assert_counters(item, on_hand=10, reserved=0)
        assert isinstance(item._events[0], StockInitialized)

    def test_negative_initial_quantity_is_rejected(self):
        with pytest.raises(InvalidQuantity):
            _item(on_hand=-1)


class TestReserve:
    def test_reserve_moves_units_to_reserved(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 3)

        _assert_counters(item, on_hand=10, reserved=3)
        reservation = item.reservation_for("ord-1")
        assert reservation.quantity == 3
        assert reservation.status == ReservationStatus.ACTIVE.value
        assert any(isinstance(e, StockReserved) for e in item._events)

    def test_reserving_exactly_what_is_available(self):
        item = _item(on_hand=1)
        item.reserve("ord-1", 1)
        _assert_counters(item, on_hand=1, reserved=1)

    def test_insufficient_stock_changes_nothing(self):
        item = _item(on_hand=2)
        with pytest.raises(InsufficientStock) as exc:
            item.reserve("ord-1", 3)

        assert exc.value.available == 2
        assert exc.value.requested == 3
        assert exc.value.sku == "TEE-BLK-M"
        _assert_counters(item, on_hand=2, reserved=0)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_is_rejected(self, quantity):
        item = _item()
        with pytest.raises(InvalidQuantity):
            item.reserve("ord-1", quantity)

    def test_one_reservation_per_order(self):
        item = _item()
        item.reserve("ord-1", 1)
        with pytest.raises(InvalidState):
            item.reserve("ord-1", 1)

    def test_low_stock_is_flagged(self):
        item = _item(on_hand=5, reorder_point=2)
        item.reserve("ord-1", 3)
        assert any(isinstance(e, LowStockDetected) for e in item._events)


class TestRelease:
    def test_release_restores_available(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)

        assert item.release("ord-1", reason="customer_aborted") is True
        _assert_counters(item, on_hand=10, reserved=0)
        assert item.reservation_for("ord-1").status == ReservationStatus.RELEASED.value
        assert isinstance(item._events[-1], ReservationReleased)

    def test_release_twice_is_a_no_op(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)
        item.release("ord-1", reason="expired")

        assert item.release("ord-1", reason="expired") is False
        _assert_counters(item, on_hand=10, reserved=0)

    def test_release_without_reservation(self):
        with pytest.raises(InvalidState):
            _item().release("ord-unknown", reason="expired")


class TestCommit:
    def test_commit_consumes_reserved_units(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)

        assert item.commit("ord-1") is True
        _assert_counters(item, on_hand=6, reserved=0)
        assert item.reservation_for("ord-1").status == ReservationStatus.COMMITTED.value
        assert any(isinstance(e, StockCommitted) for e in item._events)

    def test_commit_twice_is_a_no_op(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)
        item.commit("ord-1")

        assert item.commit("ord-1") is False
        _assert_counters(item, on_hand=6, reserved=0)

    def test_released_reservation_cannot_be_committed(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)
        item.release("ord-1", reason="expired")

        with pytest.raises(InvalidState):
            item.commit("ord-1")
        _assert_counters(item, on_hand=10, reserved=0)

    def test_committed_reservation_is_not_released(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)
        item.commit("ord-1")

        assert item.release("ord-1", reason="customer_aborted") is False
        _assert_counters(item, on_hand=6, reserved=0)


class TestAdjust:
    def test_restock(self):
        item = _item(on_hand=10)
        item.adjust(5, reason="restock", adjusted_by="ops")
        _assert_counters(item, on_hand=15, reserved=0)
        assert isinstance(item._events[-1], StockAdjusted)

    def test_shrink_keeps_reserved_units(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)
        item.adjust(-6, reason="damaged", adjusted_by="ops")
        _assert_counters(item, on_hand=4, reserved=4)

    def test_cannot_drop_below_reserved(self):
        item = _item(on_hand=10)
        item.reserve("ord-1", 4)
        with pytest.raises(NegativeStock) as exc:
            item.adjust(-7, reason="damaged", adjusted_by="ops")

        assert exc.value.reserved == 4
        _assert_counters(item, on_hand=10, reserved=4)

    def test_cannot_go_negative(self):
        with pytest.raises(NegativeStock):
            _item(on_hand=3).adjust(-4, reason="count correction", adjusted_by="ops")

    def test_reason_is_required(self):
        with pytest.raises(InvalidInput):
            _item().adjust(1, reason="", adjusted_by="ops")

    def test_zero_change_is_rejected(self):
        with pytest.raises(InvalidInput):
            _item().adjust(0, reason="count", adjusted_by="ops")
