"""Inventory load test scenarios.

A provider onboards, lists a handful of records, then works its stock:
single adjustments, a bulk repricing and availability reads.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    adjustment_data,
    bulk_price_data,
    digital_product_data,
    physical_product_data,
    provider_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ProviderState


def onboard_provider(client, state: ProviderState) -> bool:
    """Register and verify a provider. Returns False when either step fails."""
    with client.post(
        "/accounts/providers",
        json=provider_data(),
        catch_response=True,
        name="POST /accounts/providers",
    ) as resp:
        if resp.status_code != 201:
            resp.failure(f"Register provider failed: {resp.status_code}: {extract_error_detail(resp)}")
            return False
        state.provider_id = resp.json()["provider_id"]

    with client.put(
        f"/accounts/providers/{state.provider_id}/verify",
        catch_response=True,
        name="PUT /accounts/providers/{id}/verify",
    ) as resp:
        if resp.status_code != 200:
            resp.failure(f"Verify provider failed: {resp.status_code}: {extract_error_detail(resp)}")
            return False
    return True


def list_product(client, state: ProviderState, payload: dict) -> str | None:
    with client.post("/products", json=payload, catch_response=True, name="POST /products") as resp:
        if resp.status_code != 201:
            resp.failure(f"List product failed: {resp.status_code}: {extract_error_detail(resp)}")
            return None
        product_id = resp.json()["product_id"]
    state.product_ids.append(product_id)
    # Digital listings are normalized server side, so record what was stored.
    stored = client.get(f"/products/{product_id}", name="GET /products/{id}").json()
    state.expected_stock[product_id] = stored["stock_quantity"]
    return product_id


class ProviderInventoryJourney(SequentialTaskSet):
    """Onboard -> List Records -> Adjust Stock -> Bulk Reprice -> Availability."""

    def on_start(self):
        self.state = ProviderState()

    @task
    def onboard(self):
        if not onboard_provider(self.client, self.state):
            self.interrupt()

    @task
    def list_records(self):
        for _ in range(3):
            list_product(self.client, self.state, physical_product_data(self.state.provider_id))
        if not self.state.product_ids:
            self.interrupt()
        # A digital edition of the first pressing gives the availability view an alternative.
        first = self.client.get(f"/products/{self.state.product_ids[0]}", name="GET /products/{id}").json()
        list_product(self.client, self.state, digital_product_data(self.state.provider_id, first["album_id"]))
        self.state.album_id = first["album_id"]

    @task
    def album_formats(self):
        self.client.get(f"/products/albums/{self.state.album_id}/formats", name="GET /products/albums/{id}/formats")

    @task
    def adjust_stock(self):
        for product_id, expected in list(self.state.expected_stock.items()):
            if expected == 0:
                continue
            change_type = random.choice(["INCREMENT", "DECREMENT"])
            quantity = random.randint(1, min(expected, 5))
            with self.client.post(
                f"/products/{product_id}/stock/adjustments",
                json=adjustment_data(self.state.provider_id, change_type, quantity),
                catch_response=True,
                name="POST /products/{id}/stock/adjustments",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Adjust stock failed: {resp.status_code}: {extract_error_detail(resp)}")
                    continue
                self.state.expected_stock[product_id] = resp.json()["stock_quantity"]

    @task
    def bulk_reprice(self):
        with self.client.post(
            "/products/bulk",
            json=bulk_price_data(self.state.provider_id, self.state.product_ids),
            catch_response=True,
            name="POST /products/bulk",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Bulk update failed: {resp.status_code}: {extract_error_detail(resp)}")
            elif resp.json()["updated_count"] != len(self.state.product_ids):
                resp.failure("Bulk update touched a partial batch")

    @task
    def check_availability(self):
        for product_id, expected in self.state.expected_stock.items():
            with self.client.get(
                f"/products/{product_id}/availability",
                catch_response=True,
                name="GET /products/{id}/availability",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Availability failed: {resp.status_code}: {extract_error_detail(resp)}")
                elif resp.json()["stock_quantity"] != expected:
                    resp.failure(f"Stock drifted: expected {expected}, got {resp.json()['stock_quantity']}")

    @task
    def inventory_summary(self):
        self.client.get(
            f"/products/providers/{self.state.provider_id}/inventory",
            name="GET /products/providers/{id}/inventory",
        )

    @task
    def done(self):
        self.interrupt()


class InventoryUser(HttpUser):
    """Providers managing their own stock."""

    tasks = [ProviderInventoryJourney]
    wait_time = between(0.5, 2.0)
