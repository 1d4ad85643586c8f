"""Tests for environment-driven marketplace settings."""

from marketplace.config import Settings, get_settings, reset_settings


def test_defaults():
    settings = Settings()
    assert settings.low_stock_threshold == 5
    assert settings.digital_stock_floor == 999
    assert settings.digital_stock_sentinel == 9999


def test_from_env(monkeypatch):
    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "3")
    monkeypatch.setenv("STOCK_LOCK_TIMEOUT", "1.5")
    settings = Settings.from_env()
    assert settings.low_stock_threshold == 3
    assert settings.stock_lock_timeout == 1.5


def test_get_settings_is_cached(monkeypatch):
    reset_settings()
    first = get_settings()
    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "42")
    assert get_settings() is first

    reset_settings()
    assert get_settings().low_stock_threshold == 42
