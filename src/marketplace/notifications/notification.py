"""Notification aggregate: an in-app message for a buyer or a provider.

Records are created from domain events; delivering them (email, push) is
left to an outside service that reads unread notifications.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from marketplace.domain import marketplace


class RecipientType(Enum):
    BUYER = "Buyer"
    PROVIDER = "Provider"


class NotificationType(Enum):
    ORDER_PLACED = "Order_Placed"
    NEW_ORDER_ITEM = "New_Order_Item"
    ORDER_ITEM_ACCEPTED = "Order_Item_Accepted"
    ORDER_ITEM_REJECTED = "Order_Item_Rejected"
    ORDER_STATUS_CHANGED = "Order_Status_Changed"
    LOW_STOCK_ALERT = "Low_Stock_Alert"


@marketplace.aggregate
class Notification:
    recipient_id = Identifier(required=True)
    recipient_type = String(required=True, choices=RecipientType)
    notification_type = String(required=True, choices=NotificationType)
    message = Text(required=True)
    reference_id = Identifier()
    is_read = Boolean(default=False)
    created_at = DateTime()
    read_at = DateTime()

    @classmethod
    def create(cls, recipient_id, recipient_type, notification_type, message, reference_id=None):
        return cls(
            recipient_id=str(recipient_id),
            recipient_type=recipient_type.value,
            notification_type=notification_type.value,
            message=message,
            reference_id=str(reference_id) if reference_id else None,
            created_at=datetime.now(UTC),
        )

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = datetime.now(UTC)


@marketplace.repository(part_of=Notification)
class NotificationRepository:
    def find_for_recipient(self, recipient_id, unread_only=False) -> list[Notification]:
        query = self._dao.query.filter(recipient_id=str(recipient_id))
        if unread_only:
            query = query.filter(is_read=False)
        return sorted(query.limit(None).all().items, key=lambda n: n.created_at, reverse=True)
