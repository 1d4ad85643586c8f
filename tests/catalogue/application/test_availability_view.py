"""Tests for the catalog availability projections over stored products."""

import pytest
from marketplace.catalogue import availability
from marketplace.catalogue.availability import StockStatus
from marketplace.catalogue.ledger import stock_ledger
from marketplace.catalogue.listing import DeactivateProduct
from protean.utils.globals import current_domain


@pytest.fixture
def provider_id(make_provider):
    return make_provider()


def _deactivate(product_id, provider_id):
    current_domain.process(DeactivateProduct(product_id=product_id, provider_id=provider_id), asynchronous=False)


class TestProductAvailability:
    def test_status_badges(self, provider_id, make_product):
        plenty = make_product(provider_id, stock_quantity=10)
        few = make_product(provider_id, stock_quantity=2)
        none = make_product(provider_id, stock_quantity=0)

        assert availability.availability_for(plenty).stock_status == StockStatus.IN_STOCK
        assert availability.availability_for(few).stock_status == StockStatus.LOW_STOCK
        assert availability.availability_for(none).stock_status == StockStatus.OUT_OF_STOCK

    def test_alternative_format_detected(self, provider_id, make_product):
        vinyl = make_product(provider_id, album_id="album-kob")
        digital = make_product(provider_id, album_id="album-kob", product_type="DIGITAL")

        view = availability.availability_for(vinyl)
        assert view.has_alternative_format is True
        assert view.alternative_product_ids == [digital]

    def test_same_format_is_not_alternative(self, provider_id, make_product):
        first = make_product(provider_id, album_id="album-kob")
        make_product(provider_id, album_id="album-kob")
        assert availability.availability_for(first).has_alternative_format is False

    def test_inactive_alternative_ignored(self, provider_id, make_product):
        vinyl = make_product(provider_id, album_id="album-kob")
        digital = make_product(provider_id, album_id="album-kob", product_type="DIGITAL")
        _deactivate(digital, provider_id)
        assert availability.availability_for(vinyl).has_alternative_format is False

    def test_status_follows_stock_changes(self, provider_id, make_product):
        product_id = make_product(provider_id, stock_quantity=10)
        stock_ledger.set_stock(product_id, provider_id, 0)
        assert availability.availability_for(product_id).stock_status == StockStatus.OUT_OF_STOCK


class TestAlbumFormats:
    def test_sorted_by_type_then_price(self, provider_id, make_provider, make_product):
        other = make_provider()
        expensive = make_product(provider_id, album_id="album-x", price=40.0)
        cheap = make_product(other, album_id="album-x", price=22.0)
        digital = make_product(provider_id, album_id="album-x", product_type="DIGITAL", price=9.0)
        make_product(provider_id, album_id="album-y")

        ids = [str(p.id) for p in availability.formats_for_album("album-x")]
        assert ids == [digital, cheap, expensive]


class TestStockLists:
    def test_low_and_out_of_stock(self, provider_id, make_product):
        make_product(provider_id, stock_quantity=10)
        low = make_product(provider_id, stock_quantity=3)
        out = make_product(provider_id, stock_quantity=0)

        assert [str(p.id) for p in availability.low_stock_products()] == [low]
        assert [str(p.id) for p in availability.out_of_stock_products()] == [out]

    def test_explicit_threshold(self, provider_id, make_product):
        mid = make_product(provider_id, stock_quantity=8)
        assert [str(p.id) for p in availability.low_stock_products(threshold=10)] == [mid]

    def test_filtered_by_provider(self, provider_id, make_provider, make_product):
        mine = make_product(provider_id, stock_quantity=0)
        make_product(make_provider(), stock_quantity=0)
        assert [str(p.id) for p in availability.out_of_stock_products(provider_id)] == [mine]

    def test_in_stock_excludes_inactive(self, provider_id, make_product):
        active = make_product(provider_id, stock_quantity=4)
        hidden = make_product(provider_id, stock_quantity=4)
        _deactivate(hidden, provider_id)
        assert [str(p.id) for p in availability.in_stock_products()] == [active]


class TestInventorySummary:
    def test_summary_counts_active_products(self, provider_id, make_product):
        make_product(provider_id, price=20.0, stock_quantity=10)
        make_product(provider_id, price=10.0, stock_quantity=3)
        make_product(provider_id, price=15.0, stock_quantity=0)
        hidden = make_product(provider_id, price=99.0, stock_quantity=50)
        _deactivate(hidden, provider_id)

        summary = availability.provider_inventory_summary(provider_id)
        assert summary.total_products == 4
        assert summary.active_products == 3
        assert summary.total_units_in_stock == 13
        assert summary.products_with_stock == 2
        assert summary.products_out_of_stock == 1
        assert summary.low_stock_products == 1
        assert summary.inventory_value == 230.0

    def test_empty_provider(self, provider_id):
        summary = availability.provider_inventory_summary(provider_id)
        assert summary.total_products == 0
        assert summary.inventory_value == 0.0


class TestViewsPastDefaultPageSize:
    """More than 100 stored products must not truncate any view."""

    @pytest.fixture
    def crowded_catalog(self, provider_id, make_product):
        for _ in range(100):
            make_product(provider_id, album_id="album-crowded", stock_quantity=10)
        sold_out = make_product(provider_id, album_id="album-crowded", stock_quantity=0)
        running_low = make_product(provider_id, album_id="album-crowded", stock_quantity=1)
        return {"sold_out": sold_out, "running_low": running_low}

    def test_out_of_stock_found_after_first_page(self, crowded_catalog):
        assert [str(p.id) for p in availability.out_of_stock_products()] == [crowded_catalog["sold_out"]]

    def test_low_stock_found_after_first_page(self, crowded_catalog):
        assert [str(p.id) for p in availability.low_stock_products()] == [crowded_catalog["running_low"]]

    def test_summary_counts_every_product(self, provider_id, crowded_catalog):
        summary = availability.provider_inventory_summary(provider_id)
        assert summary.total_products == 102
        assert summary.total_units_in_stock == 1001
        assert summary.products_out_of_stock == 1

    def test_album_formats_include_every_listing(self, crowded_catalog):
        assert len(availability.formats_for_album("album-crowded")) == 102
