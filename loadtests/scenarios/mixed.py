"""Mixed marketplace workload scenario.

Weights model a marketplace where buyer traffic dominates and providers
manage stock in the background. This is the recommended baseline scenario.
"""

from locust import HttpUser, between

from loadtests.scenarios.inventory import ProviderInventoryJourney
from loadtests.scenarios.ordering import OrderFulfillmentJourney


class MixedWorkloadUser(HttpUser):
    """Ordering (70%) alongside provider inventory work (30%)."""

    tasks = {OrderFulfillmentJourney: 7, ProviderInventoryJourney: 3}
    wait_time = between(1.0, 3.0)
