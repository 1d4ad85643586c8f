"""Repository for the Product aggregate."""

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace


@marketplace.repository(part_of=Product)
class ProductRepository:
    """Product queries used by the availability view.

    Deactivated products stay in storage; every finder here except
    ``find_by_provider`` only returns active listings. Results are never
    truncated to the default page size.
    """

    def _all(self, **criteria):
        return self._dao.query.filter(**criteria).limit(None).all().items

    def find_by_album(self, album_id) -> list[Product]:
        return self._all(album_id=str(album_id), is_active=True)

    def find_active(self, **criteria) -> list[Product]:
        """Active products, optionally narrowed by extra field lookups."""
        return self._all(is_active=True, **criteria)

    def find_by_provider(self, provider_id, include_inactive=True, **criteria) -> list[Product]:
        if not include_inactive:
            criteria["is_active"] = True
        return self._all(provider_id=str(provider_id), **criteria)
