"""Tests for the stock counter on Product: set, adjust and low-stock detection."""

import pytest
from marketplace.catalogue.events import LowStockDetected, StockLevelChanged
from marketplace.catalogue.product import Product, StockChangeType
from protean.exceptions import ValidationError


def _product(stock=10, threshold=None):
    product = Product.create(
        provider_id="prov-001",
        album_id="album-001",
        product_type="PHYSICAL",
        price=25.0,
        stock_quantity=stock,
        low_stock_threshold=threshold,
        vinyl_size="TWELVE_INCH",
        vinyl_speed="RPM_33",
    )
    product._events.clear()
    return product


class TestSetStock:
    def test_set_replaces_counter(self):
        product = _product(stock=10)
        product.set_stock(7, reason="Recount")
        assert product.stock_quantity == 7

    def test_set_is_idempotent(self):
        product = _product(stock=10)
        product.set_stock(7)
        product.set_stock(7)
        assert product.stock_quantity == 7

    def test_set_to_zero_allowed(self):
        product = _product(stock=10)
        product.set_stock(0)
        assert product.stock_quantity == 0

    def test_negative_set_rejected_and_counter_unchanged(self):
        product = _product(stock=10)
        with pytest.raises(ValidationError):
            product.set_stock(-1)
        assert product.stock_quantity == 10

    def test_set_raises_stock_level_changed(self):
        product = _product(stock=10)
        product.set_stock(8, reason="Recount")

        events = [e for e in product._events if isinstance(e, StockLevelChanged)]
        assert len(events) == 1
        assert events[0].change_type == "SET"
        assert events[0].previous_quantity == 10
        assert events[0].new_quantity == 8
        assert events[0].reason == "Recount"

    def test_set_stamps_last_stock_update(self):
        product = _product(stock=10)
        before = product.last_stock_update
        product.set_stock(9)
        assert product.last_stock_update >= before


class TestAdjustStock:
    def test_increment(self):
        product = _product(stock=10)
        product.adjust_stock("INCREMENT", 5)
        assert product.stock_quantity == 15

    def test_decrement(self):
        product = _product(stock=10)
        product.adjust_stock(StockChangeType.DECREMENT, 4)
        assert product.stock_quantity == 6

    def test_change_type_is_case_insensitive(self):
        product = _product(stock=10)
        product.adjust_stock("increment", 1)
        assert product.stock_quantity == 11

    def test_insufficient_decrement_rejected(self):
        product = _product(stock=2)
        with pytest.raises(ValidationError) as exc:
            product.adjust_stock("DECREMENT", 3)
        assert "Insufficient stock" in str(exc.value)
        assert product.stock_quantity == 2

    def test_decrement_to_exactly_zero(self):
        product = _product(stock=3)
        product.adjust_stock("DECREMENT", 3)
        assert product.stock_quantity == 0

    @pytest.mark.parametrize("amount", [0, -2, None])
    def test_amount_must_be_positive(self, amount):
        product = _product(stock=10)
        with pytest.raises(ValidationError) as exc:
            product.adjust_stock("INCREMENT", amount)
        assert "quantity" in exc.value.messages

    @pytest.mark.parametrize("change_type", ["SET", "LISTING", "BOGUS", None])
    def test_only_increment_or_decrement(self, change_type):
        product = _product(stock=10)
        with pytest.raises(ValidationError) as exc:
            product.adjust_stock(change_type, 1)
        assert "change_type" in exc.value.messages

    def test_adjust_event_carries_change_type(self):
        product = _product(stock=10)
        product.adjust_stock("INCREMENT", 2)
        event = next(e for e in product._events if isinstance(e, StockLevelChanged))
        assert event.change_type == "INCREMENT"
        assert event.new_quantity == 12


class TestLowStockDetection:
    def test_dropping_to_threshold_raises_alert(self):
        product = _product(stock=10)
        product.set_stock(5)

        alerts = [e for e in product._events if isinstance(e, LowStockDetected)]
        assert len(alerts) == 1
        assert alerts[0].current_stock == 5
        assert alerts[0].threshold == 5

    def test_above_threshold_no_alert(self):
        product = _product(stock=10)
        product.set_stock(6)
        assert not any(isinstance(e, LowStockDetected) for e in product._events)

    def test_custom_threshold_respected(self):
        product = _product(stock=10, threshold=2)
        product.adjust_stock("DECREMENT", 7)
        assert not any(isinstance(e, LowStockDetected) for e in product._events)

        product.adjust_stock("DECREMENT", 1)
        assert any(isinstance(e, LowStockDetected) for e in product._events)
