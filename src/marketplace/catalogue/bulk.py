"""Bulk inventory operations: one mutation applied across many products.

The batch is all-or-nothing. The handler resolves every product, checks
ownership of every product, then computes and validates every new value
before the first product is changed. Any failure aborts the unit of work
and leaves the whole batch untouched.
"""

import json
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.locks import ProductLockRegistry, product_locks
from marketplace.catalogue.product import Product, StockChangeType
from marketplace.domain import marketplace
from marketplace.shared.authorization import Role, has_role, require_role, require_verified_provider
from marketplace.shared.commands import process
from marketplace.shared.exceptions import ForbiddenError
from marketplace.shared.money import decrease_by_percentage, increase_by_percentage, to_decimal

logger = structlog.get_logger(__name__)


class BulkUpdateType(Enum):
    PRICE_INCREASE_PERCENTAGE = "PRICE_INCREASE_PERCENTAGE"
    PRICE_DECREASE_PERCENTAGE = "PRICE_DECREASE_PERCENTAGE"
    PRICE_SET_FIXED = "PRICE_SET_FIXED"
    STOCK_SET = "STOCK_SET"
    STOCK_INCREMENT = "STOCK_INCREMENT"
    STOCK_DECREMENT = "STOCK_DECREMENT"
    TOGGLE_FEATURED = "TOGGLE_FEATURED"
    TOGGLE_ACTIVE = "TOGGLE_ACTIVE"


_PRICE_TYPES = {
    BulkUpdateType.PRICE_INCREASE_PERCENTAGE,
    BulkUpdateType.PRICE_DECREASE_PERCENTAGE,
    BulkUpdateType.PRICE_SET_FIXED,
}
_STOCK_TYPES = {
    BulkUpdateType.STOCK_SET,
    BulkUpdateType.STOCK_INCREMENT,
    BulkUpdateType.STOCK_DECREMENT,
}


@marketplace.command(part_of="Product")
class BulkUpdateProducts:
    product_ids = Text(required=True)  # JSON: list of product ids
    update_type = String(required=True, choices=BulkUpdateType)
    value = Float()
    boolean_value = Boolean()
    reason = String(max_length=500)
    provider_id = Identifier()
    actor_role = String(choices=Role, default=Role.PROVIDER.value)


def parse_product_ids(raw):
    """Decode the id list and drop duplicates, keeping first-seen order."""
    ids = json.loads(raw) if isinstance(raw, str) else raw
    if not isinstance(ids, list) or not ids:
        raise ValidationError({"product_ids": ["At least one product id is required"]})
    return list(dict.fromkeys(str(pid) for pid in ids))


def _require_value(update_type, value):
    if value is None:
        raise ValidationError({"value": [f"A value is required for {update_type.value}"]})
    if value < 0:
        raise ValidationError({"value": [f"Value cannot be negative: {value}"]})
    return value


def _whole_number(update_type, value):
    value = _require_value(update_type, value)
    if int(value) != value:
        raise ValidationError({"value": [f"Stock value must be a whole number: {value}"]})
    return int(value)


def plan_change(update_type, product, value=None, boolean_value=None):
    """Compute the target value for ``product`` without touching it.

    Raises ``ValidationError`` when the change would break a product
    invariant (negative stock, negative price).
    """
    if update_type == BulkUpdateType.PRICE_INCREASE_PERCENTAGE:
        return increase_by_percentage(product.price, _require_value(update_type, value))
    if update_type == BulkUpdateType.PRICE_DECREASE_PERCENTAGE:
        return decrease_by_percentage(product.price, _require_value(update_type, value))
    if update_type == BulkUpdateType.PRICE_SET_FIXED:
        return to_decimal(_require_value(update_type, value))

    if update_type == BulkUpdateType.STOCK_SET:
        return _whole_number(update_type, value)
    if update_type == BulkUpdateType.STOCK_INCREMENT:
        amount = _whole_number(update_type, value)
        if amount < 1:
            raise ValidationError({"value": ["Increment must be at least 1"]})
        return amount
    if update_type == BulkUpdateType.STOCK_DECREMENT:
        amount = _whole_number(update_type, value)
        if amount < 1:
            raise ValidationError({"value": ["Decrement must be at least 1"]})
        if product.stock_quantity - amount < 0:
            raise ValidationError(
                {
                    "value": [
                        f"Insufficient stock for product {product.id}: "
                        f"{product.stock_quantity} available, cannot remove {amount}"
                    ]
                }
            )
        return amount

    if update_type == BulkUpdateType.TOGGLE_FEATURED:
        return (not product.featured) if boolean_value is None else bool(boolean_value)
    if update_type == BulkUpdateType.TOGGLE_ACTIVE:
        return (not product.is_active) if boolean_value is None else bool(boolean_value)

    raise ValidationError({"update_type": [f"Unsupported update type: {update_type}"]})


def apply_change(update_type, product, target, reason=None):
    if update_type in _PRICE_TYPES:
        product.change_price(target, reason=reason)
    elif update_type == BulkUpdateType.STOCK_SET:
        product.set_stock(target, reason=reason)
    elif update_type == BulkUpdateType.STOCK_INCREMENT:
        product.adjust_stock(StockChangeType.INCREMENT, target, reason=reason)
    elif update_type == BulkUpdateType.STOCK_DECREMENT:
        product.adjust_stock(StockChangeType.DECREMENT, target, reason=reason)
    elif update_type == BulkUpdateType.TOGGLE_FEATURED:
        product.set_featured(target)
    elif update_type == BulkUpdateType.TOGGLE_ACTIVE:
        product.set_active(target)


@marketplace.command_handler(part_of=Product)
class BulkUpdateHandler:
    @handle(BulkUpdateProducts)
    def bulk_update(self, command):
        product_ids = parse_product_ids(command.product_ids)
        update_type = BulkUpdateType(command.update_type)
        is_admin = has_role(command.actor_role, Role.ADMIN)

        if not is_admin:
            require_role(command.actor_role, Role.PROVIDER)
            require_verified_provider(command.provider_id)

        repo = current_domain.repository_for(Product)
        products = [repo.get(product_id) for product_id in product_ids]

        if not is_admin:
            foreign = [str(p.id) for p in products if not p.belongs_to(command.provider_id)]
            if foreign:
                logger.warning(
                    "bulk_update_rejected",
                    provider_id=command.provider_id,
                    foreign_product_ids=foreign,
                )
                raise ForbiddenError(
                    {"product_ids": [f"Provider {command.provider_id} does not own: {', '.join(foreign)}"]}
                )

        planned = [
            (product, plan_change(update_type, product, command.value, command.boolean_value)) for product in products
        ]

        for product, target in planned:
            apply_change(update_type, product, target, reason=command.reason)
            repo.add(product)

        logger.info(
            "bulk_update_applied",
            update_type=update_type.value,
            product_count=len(products),
            provider_id=command.provider_id,
            admin=is_admin,
            reason=command.reason,
        )
        return [str(product.id) for product in products]


class BulkInventoryOperator:
    """Runs a bulk update while holding the locks of every product in the batch."""

    def __init__(self, locks: ProductLockRegistry | None = None):
        self.locks = locks or product_locks

    def apply(
        self,
        product_ids,
        update_type,
        value=None,
        boolean_value=None,
        reason=None,
        provider_id=None,
        actor_role=Role.PROVIDER.value,
    ) -> list[Product]:
        ids = parse_product_ids(product_ids)
        update_type = update_type.value if isinstance(update_type, BulkUpdateType) else update_type
        actor_role = actor_role.value if isinstance(actor_role, Role) else actor_role
        command = BulkUpdateProducts(
            product_ids=json.dumps(ids),
            update_type=update_type,
            value=value,
            boolean_value=boolean_value,
            reason=reason,
            provider_id=provider_id,
            actor_role=actor_role,
        )
        with self.locks.hold(*ids):
            updated_ids = process(command)

        repo = current_domain.repository_for(Product)
        return [repo.get(product_id) for product_id in updated_ids]


bulk_operator = BulkInventoryOperator()
