"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A buyer placed an order; every item is pending provider action."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    buyer_id = Identifier(required=True)
    total = Float(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderItemAssigned:
    """A line item was routed to the provider who owns its product."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    quantity = Integer(required=True)
    subtotal = Float(required=True)


@marketplace.event(part_of="Order")
class OrderItemAccepted:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    item_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    accepted_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderItemRejected:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    item_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    reason = String(required=True)
    rejected_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusUpdated:
    """The shipping workflow moved the order-level status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    buyer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    reason = String(max_length=500)
    updated_at = DateTime(required=True)
