"""Stress scenarios for per-product stock contention.

StockContentionUser points every user at the same small set of products so
concurrent adjustments and bulk batches queue on the per-product locks.
Stock must never go negative: insufficient-stock rejections (400) are
expected, lock timeouts surface as 409.
"""

import random
import threading

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import physical_product_data
from loadtests.helpers.state import ProviderState
from loadtests.scenarios.inventory import list_product, onboard_provider

_shared = ProviderState()
_setup_lock = threading.Lock()


class StockContentionUser(HttpUser):
    """Stress test: many users adjusting the same records at once.

    Monitor: 409 responses indicate lock waits exceeding the configured
    timeout; any negative stock_quantity in a response is a defect.
    """

    wait_time = constant_pacing(0.1)

    def on_start(self):
        with _setup_lock:
            if _shared.provider_id is None:
                if onboard_provider(self.client, _shared):
                    for _ in range(3):
                        list_product(self.client, _shared, physical_product_data(_shared.provider_id, 20))

    def _adjust(self, change_type):
        if not _shared.product_ids:
            return
        product_id = random.choice(_shared.product_ids)
        with self.client.post(
            f"/products/{product_id}/stock/adjustments",
            json={"provider_id": _shared.provider_id, "change_type": change_type, "quantity": 1},
            catch_response=True,
            name=f"[STRESS] POST /products/{{id}}/stock/adjustments [{change_type}]",
        ) as resp:
            if resp.status_code == 200:
                if resp.json()["stock_quantity"] < 0:
                    resp.failure("Stock went negative")
            elif resp.status_code == 400 and change_type == "DECREMENT":
                resp.success()
            else:
                resp.failure(f"Unexpected {resp.status_code}")

    @task(5)
    def decrement(self):
        self._adjust("DECREMENT")

    @task(4)
    def increment(self):
        self._adjust("INCREMENT")

    @task(1)
    def bulk_restock(self):
        if not _shared.product_ids:
            return
        self.client.post(
            "/products/bulk",
            json={
                "product_ids": _shared.product_ids,
                "update_type": "STOCK_INCREMENT",
                "value": 5,
                "provider_id": _shared.provider_id,
            },
            name="[STRESS] POST /products/bulk [STOCK_INCREMENT]",
        )
