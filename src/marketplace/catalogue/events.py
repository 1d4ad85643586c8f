"""Domain events for the Product aggregate.

``StockLevelChanged`` and ``LowStockDetected`` are the "stock changed"
signals consumed by dashboards and notifications.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A provider put a new product on sale."""

    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    album_id = Identifier(required=True)
    product_type = String(required=True)
    price = Float(required=True)
    stock_quantity = Integer(required=True)
    listed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    product_type = String(required=True)
    price = Float(required=True)
    stock_quantity = Integer(required=True)
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductPriceChanged:
    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    reason = String(max_length=500)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class StockLevelChanged:
    """The stock counter of a product moved (set, adjusted, bulk or listing update)."""

    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    change_type = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    reason = String(max_length=500)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class LowStockDetected:
    """Stock fell to or below the product's low-stock threshold."""

    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    current_stock = Integer(required=True)
    threshold = Integer(required=True)
    detected_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductFeaturedToggled:
    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    featured = Boolean(required=True)


@marketplace.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductReactivated:
    __version__ = 1

    product_id = Identifier(required=True)
    provider_id = Identifier(required=True)
    reactivated_at = DateTime(required=True)
