"""Order aggregate: a buyer's purchase split into provider-scoped items.

Prices and providers are captured on each OrderItem when the order is
placed, so later catalog edits never change an existing order.

Item lifecycle (one per provider action):
    PENDING → ACCEPTED   (terminal)
    PENDING → REJECTED   (terminal, reason required)

Order status is driven by the shipping workflow and is independent of the
item statuses:
    PENDING → SHIPPED → DELIVERED
    PENDING → REJECTED

``fulfillment_status`` is a read-only summary computed from the items.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from marketplace.domain import marketplace
from marketplace.ordering.events import (
    OrderItemAccepted,
    OrderItemAssigned,
    OrderItemRejected,
    OrderPlaced,
    OrderStatusUpdated,
)
from marketplace.shared.exceptions import InvalidStateError
from marketplace.shared.money import as_amount, line_total, sum_amounts

ORDER_NUMBER_FORMAT = "ORD-%Y%m%d-%H%M%S"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    REJECTED = "REJECTED"


class ItemStatus(Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class FulfillmentStatus(Enum):
    AWAITING_PROVIDERS = "AWAITING_PROVIDERS"
    PARTIALLY_ACCEPTED = "PARTIALLY_ACCEPTED"
    PARTIALLY_REJECTED = "PARTIALLY_REJECTED"
    FULFILLED = "FULFILLED"
    REJECTED = "REJECTED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.SHIPPED, OrderStatus.REJECTED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.REJECTED: set(),  # Terminal
}


def generate_order_number(now=None):
    return (now or datetime.now(UTC)).strftime(ORDER_NUMBER_FORMAT)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, frozen at checkout."""

    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """One product line of an order, owned by the product's provider at checkout."""

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)
    status = String(choices=ItemStatus, default=ItemStatus.PENDING.value)
    rejection_reason = String(max_length=500)
    decided_at = DateTime()

    def belongs_to(self, provider_id):
        """True when ``provider_id`` is the provider recorded on this item."""
        return provider_id is not None and str(self.provider_id) == str(provider_id)

    @property
    def is_pending(self):
        return self.status == ItemStatus.PENDING.value

    def _assert_pending(self, action):
        if not self.is_pending:
            raise InvalidStateError({"status": [f"Cannot {action} item {self.id}: already {self.status}"]})

    def accept(self):
        self._assert_pending("accept")
        self.status = ItemStatus.ACCEPTED.value
        self.decided_at = datetime.now(UTC)

    def reject(self, reason):
        self._assert_pending("reject")
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["A rejection reason is required"]})
        self.status = ItemStatus.REJECTED.value
        self.rejection_reason = reason.strip()
        self.decided_at = datetime.now(UTC)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    order_number = String(required=True, max_length=30)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(max_length=50)
    total = Float(default=0.0, min_value=0.0)
    rejection_reason = String(max_length=500)
    shipped_at = DateTime()
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, buyer_id, lines, payment_method=None, shipping_address=None):
        """Build a pending order from resolved lines.

        Args:
            buyer_id: The buyer placing the order.
            lines: List of dicts with product_id, provider_id, quantity and
                unit_price, one per requested line. Duplicates stay separate.
            payment_method: Free-form payment method label.
            shipping_address: Dict with address, city, state, postal_code, country.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        if isinstance(shipping_address, dict):
            shipping_address = ShippingAddress(**shipping_address)

        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line["product_id"],
                provider_id=line["provider_id"],
                quantity=line["quantity"],
                unit_price=as_amount(line["unit_price"]),
                subtotal=as_amount(line_total(line["unit_price"], line["quantity"])),
            )
            for line in lines
        ]

        order = cls(
            buyer_id=buyer_id,
            order_number=generate_order_number(now),
            payment_method=payment_method,
            shipping_address=shipping_address,
            total=as_amount(sum_amounts(item.subtotal for item in items)),
            created_at=now,
            updated_at=now,
        )
        order.add_items(items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                buyer_id=str(buyer_id),
                total=order.total,
                item_count=len(items),
                placed_at=now,
            )
        )
        for item in order.items:
            order.raise_(
                OrderItemAssigned(
                    order_id=str(order.id),
                    order_number=order.order_number,
                    item_id=str(item.id),
                    product_id=str(item.product_id),
                    provider_id=str(item.provider_id),
                    quantity=item.quantity,
                    subtotal=item.subtotal,
                )
            )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def item(self, item_id):
        found = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if found is None:
            raise ObjectNotFoundError({"item_id": [f"Order {self.id} has no item {item_id}"]})
        return found

    def items_for(self, provider_id):
        return [i for i in self.items if i.belongs_to(provider_id)]

    def has_pending_items_for(self, provider_id):
        return any(i.is_pending and i.belongs_to(provider_id) for i in self.items)

    @property
    def provider_ids(self):
        return sorted({str(i.provider_id) for i in self.items})

    @property
    def fulfillment_status(self):
        statuses = [i.status for i in self.items]
        accepted = statuses.count(ItemStatus.ACCEPTED.value)
        rejected = statuses.count(ItemStatus.REJECTED.value)

        if statuses and accepted == len(statuses):
            return FulfillmentStatus.FULFILLED
        if statuses and rejected == len(statuses):
            return FulfillmentStatus.REJECTED
        if rejected:
            return FulfillmentStatus.PARTIALLY_REJECTED
        if accepted:
            return FulfillmentStatus.PARTIALLY_ACCEPTED
        return FulfillmentStatus.AWAITING_PROVIDERS

    # -------------------------------------------------------------------
    # Item transitions
    # -------------------------------------------------------------------
    def accept_item(self, item_id):
        item = self.item(item_id)
        item.accept()
        self.updated_at = item.decided_at

        self.raise_(
            OrderItemAccepted(
                order_id=str(self.id),
                order_number=self.order_number,
                item_id=str(item.id),
                buyer_id=str(self.buyer_id),
                provider_id=str(item.provider_id),
                accepted_at=item.decided_at,
            )
        )
        return item

    def reject_item(self, item_id, reason):
        item = self.item(item_id)
        item.reject(reason)
        self.updated_at = item.decided_at

        self.raise_(
            OrderItemRejected(
                order_id=str(self.id),
                order_number=self.order_number,
                item_id=str(item.id),
                buyer_id=str(self.buyer_id),
                provider_id=str(item.provider_id),
                reason=item.rejection_reason,
                rejected_at=item.decided_at,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Order status (shipping workflow)
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def update_status(self, new_status, reason=None):
        try:
            target = OrderStatus(new_status.value if isinstance(new_status, OrderStatus) else new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]}) from None

        self._assert_can_transition(target)
        if target == OrderStatus.REJECTED and (not reason or not reason.strip()):
            raise ValidationError({"reason": ["A rejection reason is required"]})

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        if target == OrderStatus.SHIPPED:
            self.shipped_at = now
        elif target == OrderStatus.DELIVERED:
            self.delivered_at = now
        elif target == OrderStatus.REJECTED:
            self.rejection_reason = reason.strip()
        self.updated_at = now

        self.raise_(
            OrderStatusUpdated(
                order_id=str(self.id),
                order_number=self.order_number,
                buyer_id=str(self.buyer_id),
                previous_status=previous,
                new_status=target.value,
                reason=reason,
                updated_at=now,
            )
        )
