"""Ordering and fulfillment load test scenarios.

A buyer orders records from two providers; each provider then decides on
its own item and the order is shipped and delivered.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import buyer_data, order_data, physical_product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import BuyerState, ProviderState
from loadtests.scenarios.inventory import list_product, onboard_provider


class OrderFulfillmentJourney(SequentialTaskSet):
    """Providers List -> Buyer Registers -> Place Order -> Decide Items -> Ship -> Deliver."""

    def on_start(self):
        self.providers = [ProviderState(), ProviderState()]
        self.buyer = BuyerState()
        self.order_id = None

    @task
    def set_up_providers(self):
        for provider in self.providers:
            if not onboard_provider(self.client, provider):
                self.interrupt()
            if list_product(self.client, provider, physical_product_data(provider.provider_id, 100)) is None:
                self.interrupt()

    @task
    def register_buyer(self):
        with self.client.post(
            "/accounts/buyers",
            json=buyer_data(),
            catch_response=True,
            name="POST /accounts/buyers",
        ) as resp:
            if resp.status_code == 201:
                self.buyer.buyer_id = resp.json()["buyer_id"]
            else:
                resp.failure(f"Register buyer failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def place_order(self):
        product_ids = [p.product_ids[0] for p in self.providers]
        with self.client.post(
            "/orders",
            json=order_data(self.buyer.buyer_id, product_ids),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.order_id = resp.json()["order_id"]
                self.buyer.order_ids.append(self.order_id)
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def providers_decide(self):
        order = self.client.get(f"/orders/{self.order_id}", name="GET /orders/{id}").json()
        for item in order["items"]:
            # Mostly accepted, with the occasional out-of-stock rejection.
            if random.random() < 0.9:
                url, payload = "accept", {"provider_id": item["provider_id"]}
            else:
                url, payload = "reject", {"provider_id": item["provider_id"], "reason": "Out of stock"}
            with self.client.put(
                f"/orders/{self.order_id}/items/{item['item_id']}/{url}",
                json=payload,
                catch_response=True,
                name=f"PUT /orders/{{id}}/items/{{item_id}}/{url}",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Item decision failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def provider_views(self):
        for provider in self.providers:
            self.client.get(f"/orders/provider/{provider.provider_id}", name="GET /orders/provider/{id}")

    @task
    def ship_and_deliver(self):
        for status in ("SHIPPED", "DELIVERED"):
            with self.client.put(
                f"/orders/{self.order_id}/status",
                json={"status": status},
                catch_response=True,
                name=f"PUT /orders/{{id}}/status [{status}]",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Status {status} failed: {resp.status_code}: {extract_error_detail(resp)}")
                    return

    @task
    def buyer_history(self):
        self.client.get(f"/orders/buyer/{self.buyer.buyer_id}", name="GET /orders/buyer/{id}")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Buyers placing multi-provider orders."""

    tasks = [OrderFulfillmentJourney]
    wait_time = between(1.0, 3.0)
