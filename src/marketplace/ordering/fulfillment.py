"""Provider decisions on order items: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.ordering.order import Order
from marketplace.shared.authorization import require_owner, require_verified_provider

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class AcceptOrderItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    provider_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class RejectOrderItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


def _load_item_for_provider(order_id, item_id, provider_id):
    require_verified_provider(provider_id)
    repo = current_domain.repository_for(Order)
    order = repo.get(order_id)
    item = order.item(item_id)
    require_owner(provider_id, item, label="order item")
    return repo, order


@marketplace.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(AcceptOrderItem)
    def accept_item(self, command):
        repo, order = _load_item_for_provider(command.order_id, command.item_id, command.provider_id)
        item = order.accept_item(command.item_id)
        repo.add(order)

        logger.info(
            "order_item_accepted",
            order_id=str(order.id),
            item_id=str(item.id),
            provider_id=command.provider_id,
            fulfillment_status=order.fulfillment_status.value,
        )
        return item.status

    @handle(RejectOrderItem)
    def reject_item(self, command):
        repo, order = _load_item_for_provider(command.order_id, command.item_id, command.provider_id)
        item = order.reject_item(command.item_id, command.reason)
        repo.add(order)

        logger.info(
            "order_item_rejected",
            order_id=str(order.id),
            item_id=str(item.id),
            provider_id=command.provider_id,
            reason=item.rejection_reason,
            fulfillment_status=order.fulfillment_status.value,
        )
        return item.status
