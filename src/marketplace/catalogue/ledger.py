"""Stock ledger: the entry point for single-product stock mutations.

Each call holds the product's lock around the command dispatch so the
read, the change and the unit-of-work commit happen as one step. Two
concurrent adjustments on one product therefore never lose an update.
"""

from protean.utils.globals import current_domain

from marketplace.catalogue.locks import ProductLockRegistry, product_locks
from marketplace.catalogue.product import Product
from marketplace.catalogue.stock import AdjustStock, SetStock
from marketplace.shared.commands import process


class StockLedger:
    def __init__(self, locks: ProductLockRegistry | None = None):
        self.locks = locks or product_locks

    def set_stock(self, product_id, provider_id, quantity, reason=None) -> Product:
        command = SetStock(
            product_id=product_id,
            provider_id=provider_id,
            quantity=quantity,
            reason=reason,
        )
        self.process_locked(command, product_id)
        return self.get(product_id)

    def adjust_stock(self, product_id, provider_id, change_type, quantity, reason=None) -> Product:
        command = AdjustStock(
            product_id=product_id,
            provider_id=provider_id,
            change_type=change_type,
            quantity=quantity,
            reason=reason,
        )
        self.process_locked(command, product_id)
        return self.get(product_id)

    def process_locked(self, command, *product_ids):
        """Process any command that may move stock while holding the products' locks."""
        with self.locks.hold(*product_ids):
            return process(command)

    def get(self, product_id) -> Product:
        return current_domain.repository_for(Product).get(product_id)

    def stock_of(self, product_id) -> int:
        return self.get(product_id).stock_quantity


stock_ledger = StockLedger()
