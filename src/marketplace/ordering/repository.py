"""Repository for the Order aggregate."""

from marketplace.domain import marketplace
from marketplace.ordering.order import Order


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


@marketplace.repository(part_of=Order)
class OrderRepository:
    """Order queries for buyers and providers.

    Provider ids live on the items, so provider queries load the orders and
    filter in memory. Every finder reads past the default page size.
    """

    def _all(self, **criteria):
        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        return query.limit(None).all().items

    def find_by_buyer(self, buyer_id) -> list[Order]:
        return _newest_first(self._all(buyer_id=str(buyer_id)))

    def find_by_order_number(self, order_number) -> list[Order]:
        return self._all(order_number=order_number)

    def find_for_provider(self, provider_id) -> list[Order]:
        """Orders with at least one item belonging to ``provider_id``."""
        return _newest_first(o for o in self._all() if o.items_for(provider_id))

    def find_pending_for_provider(self, provider_id) -> list[Order]:
        """Orders with at least one PENDING item belonging to ``provider_id``."""
        return _newest_first(o for o in self._all() if o.has_pending_items_for(provider_id))
