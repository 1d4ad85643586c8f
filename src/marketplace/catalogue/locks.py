"""Per-product locks serializing stock read-modify-write cycles.

Locks live in process memory. A deployment with several worker processes
needs row-level locking in the database instead.
"""

import threading
from contextlib import contextmanager

import structlog

from marketplace.config import get_settings
from marketplace.shared.exceptions import StockConflictError

logger = structlog.get_logger(__name__)


class _ProductLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0  # holders plus waiters


class ProductLockRegistry:
    """Hands out one re-entrant lock per product id.

    A product's lock lives only while some thread holds or waits for it.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout
        self._locks: dict[str, _ProductLock] = {}
        self._guard = threading.Lock()

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else get_settings().stock_lock_timeout

    def __len__(self):
        with self._guard:
            return len(self._locks)

    def _checkout(self, product_id: str) -> threading.RLock:
        with self._guard:
            entry = self._locks.get(product_id)
            if entry is None:
                entry = self._locks[product_id] = _ProductLock()
            entry.users += 1
            return entry.lock

    def _checkin(self, product_id: str) -> None:
        with self._guard:
            entry = self._locks.get(product_id)
            if entry is None:
                return
            entry.users -= 1
            if entry.users == 0:
                del self._locks[product_id]

    @contextmanager
    def hold(self, *product_ids):
        """Hold the locks of all given products.

        Ids are de-duplicated and acquired in sorted order so two batches
        over overlapping products cannot deadlock. Waiting longer than the
        timeout raises ``StockConflictError``.
        """
        ordered = sorted({str(pid) for pid in product_ids})
        checked_out = []
        acquired = []
        try:
            for product_id in ordered:
                lock = self._checkout(product_id)
                checked_out.append(product_id)
                if not lock.acquire(timeout=self.timeout):
                    logger.warning("stock_lock_timeout", product_id=product_id, timeout=self.timeout)
                    raise StockConflictError(
                        {"product_id": [f"Product {product_id} is being updated by another request, retry later"]}
                    )
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for product_id in reversed(checked_out):
                self._checkin(product_id)

    def clear(self):
        with self._guard:
            self._locks.clear()


product_locks = ProductLockRegistry()
