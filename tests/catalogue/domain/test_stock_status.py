"""Tests for stock status classification."""

import pytest
from marketplace.catalogue.availability import StockStatus, stock_status


@pytest.mark.parametrize(
    "quantity, expected",
    [
        (0, StockStatus.OUT_OF_STOCK),
        (None, StockStatus.OUT_OF_STOCK),
        (1, StockStatus.LOW_STOCK),
        (5, StockStatus.LOW_STOCK),
        (6, StockStatus.IN_STOCK),
        (9999, StockStatus.IN_STOCK),
    ],
)
def test_default_threshold(quantity, expected):
    assert stock_status(quantity) == expected


def test_explicit_threshold():
    assert stock_status(8, threshold=10) == StockStatus.LOW_STOCK
    assert stock_status(8, threshold=2) == StockStatus.IN_STOCK


def test_zero_threshold_never_low():
    assert stock_status(1, threshold=0) == StockStatus.IN_STOCK


def test_threshold_from_environment(monkeypatch):
    from marketplace.config import reset_settings

    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "10")
    reset_settings()
    assert stock_status(8) == StockStatus.LOW_STOCK
