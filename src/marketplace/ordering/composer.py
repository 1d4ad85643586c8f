"""Order composition: turns a buyer's cart into a pending Order.

Every product is resolved before anything is written, and price and
provider are copied onto the items. No stock is checked or reserved here;
stock only moves through the stock ledger.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.accounts.account import Buyer
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.ordering.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {"product_id", "quantity"}
    payment_method = String(required=True, max_length=50)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


def parse_order_lines(raw):
    """Decode and validate the requested (product_id, quantity) pairs."""
    lines = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(lines, list) or not lines:
        raise ValidationError({"items": ["An order needs at least one item"]})

    parsed = []
    for position, line in enumerate(lines):
        product_id = line.get("product_id") if isinstance(line, dict) else None
        quantity = line.get("quantity") if isinstance(line, dict) else None
        if not product_id:
            raise ValidationError({"items": [f"Line {position + 1}: product_id is required"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": [f"Line {position + 1}: quantity must be a whole number of at least 1"]})
        parsed.append((str(product_id), quantity))
    return parsed


def _resolve_buyer(buyer_id):
    buyer = current_domain.repository_for(Buyer).get(buyer_id)
    if not buyer.is_active:
        raise ObjectNotFoundError({"buyer_id": [f"Buyer {buyer_id} is not active"]})
    return buyer


@marketplace.command_handler(part_of=Order)
class OrderComposer:
    @handle(PlaceOrder)
    def place_order(self, command):
        requested = parse_order_lines(command.items)
        buyer = _resolve_buyer(command.buyer_id)

        products = current_domain.repository_for(Product)
        lines = []
        for product_id, quantity in requested:
            product = products.get(product_id)
            lines.append(
                {
                    "product_id": str(product.id),
                    "provider_id": str(product.provider_id),
                    "quantity": quantity,
                    "unit_price": product.price,
                }
            )

        order = Order.create(
            buyer_id=str(buyer.id),
            lines=lines,
            payment_method=command.payment_method,
            shipping_address={
                "address": command.address,
                "city": command.city,
                "state": command.state,
                "postal_code": command.postal_code,
                "country": command.country,
            },
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            buyer_id=str(buyer.id),
            item_count=len(order.items),
            provider_ids=order.provider_ids,
            total=order.total,
        )
        return str(order.id)
