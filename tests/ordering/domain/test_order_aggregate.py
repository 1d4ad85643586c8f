"""Tests for Order creation: captured prices, totals and events."""

import re
from datetime import UTC, datetime

import pytest
from marketplace.ordering.events import OrderItemAssigned, OrderPlaced
from marketplace.ordering.order import Order, OrderStatus, generate_order_number
from protean.exceptions import ObjectNotFoundError, ValidationError

ADDRESS = {
    "address": "12 Groove Street",
    "city": "Portland",
    "state": "OR",
    "postal_code": "97201",
    "country": "US",
}


def _lines():
    return [
        {"product_id": "p1", "provider_id": "prov-a", "quantity": 2, "unit_price": 10.00},
        {"product_id": "p2", "provider_id": "prov-b", "quantity": 1, "unit_price": 19.50},
    ]


def _make_order(lines=None):
    return Order.create(
        buyer_id="buyer-001",
        lines=lines if lines is not None else _lines(),
        payment_method="CARD",
        shipping_address=ADDRESS,
    )


class TestOrderCreation:
    def test_total_is_sum_of_subtotals(self):
        order = _make_order()
        assert order.total == 39.50
        assert [i.subtotal for i in order.items] == [20.00, 19.50]

    def test_items_capture_price_and_provider(self):
        order = _make_order()
        first, second = order.items
        assert first.unit_price == 10.00
        assert first.provider_id == "prov-a"
        assert second.provider_id == "prov-b"

    def test_new_order_and_items_are_pending(self):
        order = _make_order()
        assert order.status == OrderStatus.PENDING.value
        assert all(i.status == "PENDING" for i in order.items)

    def test_order_number_format(self):
        order = _make_order()
        assert re.fullmatch(r"ORD-\d{8}-\d{6}", order.order_number)

    def test_generate_order_number_from_timestamp(self):
        moment = datetime(2024, 3, 9, 14, 5, 7, tzinfo=UTC)
        assert generate_order_number(moment) == "ORD-20240309-140507"

    def test_shipping_address_captured(self):
        order = _make_order()
        assert order.shipping_address.city == "Portland"
        assert order.shipping_address.postal_code == "97201"

    def test_empty_lines_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_order(lines=[])
        assert "items" in exc.value.messages

    def test_duplicate_products_stay_separate_lines(self):
        lines = [
            {"product_id": "p1", "provider_id": "prov-a", "quantity": 1, "unit_price": 10.0},
            {"product_id": "p1", "provider_id": "prov-a", "quantity": 2, "unit_price": 10.0},
        ]
        order = _make_order(lines=lines)
        assert len(order.items) == 2
        assert order.total == 30.0

    def test_subtotal_rounds_to_cents(self):
        lines = [{"product_id": "p1", "provider_id": "prov-a", "quantity": 3, "unit_price": 3.335}]
        order = _make_order(lines=lines)
        assert order.items[0].unit_price == 3.34
        assert order.items[0].subtotal == 10.01


class TestOrderEvents:
    def test_order_placed_raised(self):
        order = _make_order()
        placed = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(placed) == 1
        assert placed[0].total == 39.50
        assert placed[0].item_count == 2

    def test_one_assignment_per_item(self):
        order = _make_order()
        assigned = [e for e in order._events if isinstance(e, OrderItemAssigned)]
        assert sorted(e.provider_id for e in assigned) == ["prov-a", "prov-b"]


class TestOrderQueries:
    def test_item_lookup(self):
        order = _make_order()
        item = order.items[0]
        assert order.item(item.id).id == item.id

    def test_unknown_item_raises_not_found(self):
        order = _make_order()
        with pytest.raises(ObjectNotFoundError):
            order.item("missing")

    def test_items_for_provider(self):
        order = _make_order()
        assert [i.product_id for i in order.items_for("prov-b")] == ["p2"]
        assert order.items_for("prov-z") == []

    def test_provider_ids(self):
        assert _make_order().provider_ids == ["prov-a", "prov-b"]
