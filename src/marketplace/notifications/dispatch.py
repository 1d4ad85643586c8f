"""Event handlers turning order and stock events into notifications."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.catalogue.events import LowStockDetected
from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.notifications.notification import Notification, NotificationType, RecipientType
from marketplace.ordering.events import (
    OrderItemAccepted,
    OrderItemAssigned,
    OrderItemRejected,
    OrderPlaced,
    OrderStatusUpdated,
)
from marketplace.ordering.order import Order

logger = structlog.get_logger(__name__)


def notify(recipient_id, recipient_type, notification_type, message, reference_id=None):
    notification = Notification.create(
        recipient_id=recipient_id,
        recipient_type=recipient_type,
        notification_type=notification_type,
        message=message,
        reference_id=reference_id,
    )
    current_domain.repository_for(Notification).add(notification)
    logger.info(
        "notification_created",
        notification_id=str(notification.id),
        recipient_id=str(recipient_id),
        notification_type=notification_type.value,
    )
    return notification


@marketplace.event_handler(part_of=Order)
class OrderNotificationHandler:
    """Tells buyers about their orders and providers about new items."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify(
            event.buyer_id,
            RecipientType.BUYER,
            NotificationType.ORDER_PLACED,
            f"Your order {event.order_number} has been placed. Total: {event.total:.2f}",
            reference_id=event.order_id,
        )

    @handle(OrderItemAssigned)
    def on_item_assigned(self, event: OrderItemAssigned) -> None:
        notify(
            event.provider_id,
            RecipientType.PROVIDER,
            NotificationType.NEW_ORDER_ITEM,
            f"New order {event.order_number}: {event.quantity} unit(s) awaiting your confirmation",
            reference_id=event.order_id,
        )

    @handle(OrderItemAccepted)
    def on_item_accepted(self, event: OrderItemAccepted) -> None:
        notify(
            event.buyer_id,
            RecipientType.BUYER,
            NotificationType.ORDER_ITEM_ACCEPTED,
            f"An item in order {event.order_number} was accepted by the seller",
            reference_id=event.order_id,
        )

    @handle(OrderItemRejected)
    def on_item_rejected(self, event: OrderItemRejected) -> None:
        notify(
            event.buyer_id,
            RecipientType.BUYER,
            NotificationType.ORDER_ITEM_REJECTED,
            f"An item in order {event.order_number} was rejected by the seller: {event.reason}",
            reference_id=event.order_id,
        )

    @handle(OrderStatusUpdated)
    def on_status_updated(self, event: OrderStatusUpdated) -> None:
        notify(
            event.buyer_id,
            RecipientType.BUYER,
            NotificationType.ORDER_STATUS_CHANGED,
            f"Order {event.order_number} is now {event.new_status}",
            reference_id=event.order_id,
        )


@marketplace.event_handler(part_of=Product)
class StockAlertHandler:
    @handle(LowStockDetected)
    def on_low_stock(self, event: LowStockDetected) -> None:
        notify(
            event.provider_id,
            RecipientType.PROVIDER,
            NotificationType.LOW_STOCK_ALERT,
            f"Product {event.product_id} is running low: {event.current_stock} left "
            f"(threshold {event.threshold})",
            reference_id=event.product_id,
        )
