"""Single-product stock operations: commands and handler.

Callers go through ``marketplace.catalogue.ledger.StockLedger`` so that
the per-product lock spans the whole unit of work.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.shared.authorization import require_owner, require_verified_provider

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Product")
class SetStock:
    """Replace a product's stock with an absolute quantity."""

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)


@marketplace.command(part_of="Product")
class AdjustStock:
    """Add to or remove from a product's stock."""

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    change_type = String(required=True, max_length=20)  # INCREMENT | DECREMENT
    quantity = Integer(required=True)
    reason = String(max_length=500)


def _load_owned_active_product(product_id, provider_id):
    require_verified_provider(provider_id)
    repo = current_domain.repository_for(Product)
    product = repo.get(product_id)
    require_owner(provider_id, product)
    product.ensure_active()
    return repo, product


@marketplace.command_handler(part_of=Product)
class StockLedgerHandler:
    @handle(SetStock)
    def set_stock(self, command):
        repo, product = _load_owned_active_product(command.product_id, command.provider_id)
        previous = product.stock_quantity
        product.set_stock(command.quantity, reason=command.reason)
        repo.add(product)

        logger.info(
            "stock_set",
            product_id=str(product.id),
            previous_quantity=previous,
            new_quantity=product.stock_quantity,
            reason=command.reason,
        )
        return product.stock_quantity

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo, product = _load_owned_active_product(command.product_id, command.provider_id)
        previous = product.stock_quantity
        product.adjust_stock(command.change_type, command.quantity, reason=command.reason)
        repo.add(product)

        logger.info(
            "stock_adjusted",
            product_id=str(product.id),
            change_type=command.change_type,
            quantity=command.quantity,
            previous_quantity=previous,
            new_quantity=product.stock_quantity,
        )
        return product.stock_quantity
