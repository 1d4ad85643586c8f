"""Tests for item decisions, fulfillment summary and order status transitions."""

import pytest
from marketplace.ordering.events import OrderItemAccepted, OrderItemRejected, OrderStatusUpdated
from marketplace.ordering.order import FulfillmentStatus, ItemStatus, Order, OrderStatus
from marketplace.shared.exceptions import InvalidStateError
from protean.exceptions import ValidationError


def _make_order(item_count=2):
    lines = [
        {"product_id": f"p{n}", "provider_id": f"prov-{n}", "quantity": 1, "unit_price": 10.0}
        for n in range(item_count)
    ]
    order = Order.create(buyer_id="buyer-001", lines=lines, payment_method="CARD")
    order._events.clear()
    return order


class TestItemDecisions:
    def test_accept_pending_item(self):
        order = _make_order()
        item = order.accept_item(order.items[0].id)
        assert item.status == ItemStatus.ACCEPTED.value
        assert item.decided_at is not None

    def test_reject_pending_item_with_reason(self):
        order = _make_order()
        item = order.reject_item(order.items[0].id, "  Out of stock  ")
        assert item.status == ItemStatus.REJECTED.value
        assert item.rejection_reason == "Out of stock"

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_reject_requires_reason(self, reason):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.reject_item(order.items[0].id, reason)
        assert order.items[0].status == ItemStatus.PENDING.value

    def test_accepted_item_is_terminal(self):
        order = _make_order()
        item_id = order.items[0].id
        order.accept_item(item_id)

        with pytest.raises(InvalidStateError):
            order.accept_item(item_id)
        with pytest.raises(InvalidStateError):
            order.reject_item(item_id, "Changed my mind")

    def test_rejected_item_is_terminal(self):
        order = _make_order()
        item_id = order.items[0].id
        order.reject_item(item_id, "Damaged sleeve")

        with pytest.raises(InvalidStateError):
            order.accept_item(item_id)

    def test_decisions_leave_other_items_untouched(self):
        order = _make_order()
        order.accept_item(order.items[0].id)
        assert order.items[1].status == ItemStatus.PENDING.value

    def test_decisions_do_not_change_order_status(self):
        order = _make_order()
        order.accept_item(order.items[0].id)
        order.reject_item(order.items[1].id, "Warped")
        assert order.status == OrderStatus.PENDING.value

    def test_accept_raises_event(self):
        order = _make_order()
        order.accept_item(order.items[0].id)
        events = [e for e in order._events if isinstance(e, OrderItemAccepted)]
        assert len(events) == 1
        assert events[0].provider_id == "prov-0"
        assert events[0].buyer_id == "buyer-001"

    def test_reject_raises_event_with_reason(self):
        order = _make_order()
        order.reject_item(order.items[1].id, "Warped")
        event = next(e for e in order._events if isinstance(e, OrderItemRejected))
        assert event.reason == "Warped"


class TestFulfillmentStatus:
    def test_all_pending(self):
        assert _make_order().fulfillment_status == FulfillmentStatus.AWAITING_PROVIDERS

    def test_some_accepted(self):
        order = _make_order()
        order.accept_item(order.items[0].id)
        assert order.fulfillment_status == FulfillmentStatus.PARTIALLY_ACCEPTED

    def test_some_rejected(self):
        order = _make_order()
        order.accept_item(order.items[0].id)
        order.reject_item(order.items[1].id, "Warped")
        assert order.fulfillment_status == FulfillmentStatus.PARTIALLY_REJECTED

    def test_all_accepted(self):
        order = _make_order()
        for item in order.items:
            order.accept_item(item.id)
        assert order.fulfillment_status == FulfillmentStatus.FULFILLED

    def test_all_rejected(self):
        order = _make_order()
        for item in order.items:
            order.reject_item(item.id, "Discontinued")
        assert order.fulfillment_status == FulfillmentStatus.REJECTED


class TestOrderStatusTransitions:
    def test_pending_to_shipped_to_delivered(self):
        order = _make_order()
        order.update_status("SHIPPED")
        assert order.status == "SHIPPED"
        assert order.shipped_at is not None

        order.update_status(OrderStatus.DELIVERED)
        assert order.status == "DELIVERED"
        assert order.delivered_at is not None

    def test_pending_to_rejected_requires_reason(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_status("REJECTED")

        order.update_status("REJECTED", reason="Payment declined")
        assert order.status == "REJECTED"
        assert order.rejection_reason == "Payment declined"

    @pytest.mark.parametrize(
        "path, target",
        [
            ([], "DELIVERED"),
            (["SHIPPED"], "REJECTED"),
            (["SHIPPED", "DELIVERED"], "SHIPPED"),
            (["SHIPPED"], "PENDING"),
        ],
    )
    def test_invalid_transitions(self, path, target):
        order = _make_order()
        for status in path:
            order.update_status(status)
        with pytest.raises(InvalidStateError):
            order.update_status(target, reason="n/a")

    def test_unknown_status_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_status("LOST")

    def test_status_update_raises_event(self):
        order = _make_order()
        order.update_status("SHIPPED")
        event = next(e for e in order._events if isinstance(e, OrderStatusUpdated))
        assert event.previous_status == "PENDING"
        assert event.new_status == "SHIPPED"
