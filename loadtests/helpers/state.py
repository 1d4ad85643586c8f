"""Per-user state tracking for Locust load test scenarios.

Each Locust user keeps its own ids; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class ProviderState:
    """A provider and the products it has listed."""

    provider_id: str | None = None
    album_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    expected_stock: dict[str, int] = field(default_factory=dict)


@dataclass
class BuyerState:
    """A buyer and the orders it has placed."""

    buyer_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
