"""Catalog availability view.

Pure, on-demand projections over the current product records: stock status
badges, alternative-format lookups and per-provider inventory summaries.
Nothing here is cached or persisted.
"""

from dataclasses import dataclass, field
from enum import Enum

from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.config import get_settings
from marketplace.shared.money import as_amount, sum_amounts, to_decimal


class StockStatus(Enum):
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


@dataclass(frozen=True)
class ProductAvailability:
    product_id: str
    album_id: str
    product_type: str
    stock_quantity: int
    stock_status: StockStatus
    is_active: bool
    has_alternative_format: bool
    alternative_product_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class InventorySummary:
    provider_id: str
    total_products: int
    active_products: int
    total_units_in_stock: int
    products_with_stock: int
    products_out_of_stock: int
    low_stock_products: int
    inventory_value: float


def stock_status(stock_quantity, threshold=None) -> StockStatus:
    """Classify a stock count. Missing or zero stock is out of stock."""
    if threshold is None:
        threshold = get_settings().low_stock_threshold
    if not stock_quantity or stock_quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock_quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def product_stock_status(product) -> StockStatus:
    return stock_status(product.stock_quantity, product.low_stock_threshold)


def _products():
    return current_domain.repository_for(Product)


def alternative_formats(product) -> list[Product]:
    """Active products of the same album sold in a different format."""
    return [
        other
        for other in _products().find_by_album(product.album_id)
        if str(other.id) != str(product.id) and other.product_type != product.product_type
    ]


def has_alternative_format(product) -> bool:
    return bool(alternative_formats(product))


def formats_for_album(album_id) -> list[Product]:
    """All active listings of an album, by format and then cheapest first."""
    return sorted(
        _products().find_by_album(album_id),
        key=lambda p: (p.product_type, p.price),
    )


def availability_for(product_id) -> ProductAvailability:
    product = _products().get(product_id)
    alternatives = alternative_formats(product)
    return ProductAvailability(
        product_id=str(product.id),
        album_id=str(product.album_id),
        product_type=product.product_type,
        stock_quantity=product.stock_quantity,
        stock_status=product_stock_status(product),
        is_active=product.is_active,
        has_alternative_format=bool(alternatives),
        alternative_product_ids=[str(p.id) for p in alternatives],
    )


def in_stock_products() -> list[Product]:
    return [p for p in _products().find_active() if p.stock_quantity > 0]


def low_stock_products(threshold=None, provider_id=None) -> list[Product]:
    """Active products with some stock left but at or below the threshold.

    Without an explicit threshold each product's own threshold applies.
    """
    products = _active_for(provider_id, stock_quantity__gt=0)
    return [
        p
        for p in products
        if p.stock_quantity <= (threshold if threshold is not None else p.low_stock_threshold)
    ]


def out_of_stock_products(provider_id=None) -> list[Product]:
    return _active_for(provider_id, stock_quantity=0)


def _active_for(provider_id, **criteria):
    if provider_id is None:
        return _products().find_active(**criteria)
    return _products().find_by_provider(provider_id, include_inactive=False, **criteria)


def provider_inventory_summary(provider_id) -> InventorySummary:
    products = _products().find_by_provider(provider_id)
    active = [p for p in products if p.is_active]
    return InventorySummary(
        provider_id=str(provider_id),
        total_products=len(products),
        active_products=len(active),
        total_units_in_stock=sum(p.stock_quantity for p in active),
        products_with_stock=sum(1 for p in active if p.stock_quantity > 0),
        products_out_of_stock=sum(1 for p in active if p.stock_quantity == 0),
        low_stock_products=sum(1 for p in active if product_stock_status(p) == StockStatus.LOW_STOCK),
        inventory_value=as_amount(sum_amounts(to_decimal(p.price) * p.stock_quantity for p in active)),
    )
