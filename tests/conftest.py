import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(scope="session", autouse=True)
def setup_db(_marketplace_domain):
    from marketplace.utils.db import drop_db, setup_db

    setup_db(_marketplace_domain)

    yield

    drop_db(_marketplace_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    from marketplace.catalogue.locks import product_locks
    from marketplace.config import reset_settings
    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    product_locks.clear()
    reset_settings()
    ctx.pop()


# ---------------------------------------------------------------------------
# Factories shared across contexts
# ---------------------------------------------------------------------------
@pytest.fixture
def make_provider():
    from marketplace.accounts.registration import RegisterProvider, VerifyProvider
    from protean.utils.globals import current_domain

    counter = {"n": 0}

    def _make(business_name=None, verified=True):
        counter["n"] += 1
        provider_id = current_domain.process(
            RegisterProvider(
                business_name=business_name or f"Crate Diggers {counter['n']}",
                email=f"seller{counter['n']}@example.com",
            ),
            asynchronous=False,
        )
        if verified:
            current_domain.process(VerifyProvider(provider_id=provider_id), asynchronous=False)
        return provider_id

    return _make


@pytest.fixture
def make_buyer():
    from marketplace.accounts.registration import RegisterBuyer
    from protean.utils.globals import current_domain

    counter = {"n": 0}

    def _make(name=None):
        counter["n"] += 1
        return current_domain.process(
            RegisterBuyer(name=name or f"Buyer {counter['n']}", email=f"buyer{counter['n']}@example.com"),
            asynchronous=False,
        )

    return _make


@pytest.fixture
def make_product():
    from marketplace.catalogue.listing import ListProduct
    from protean.utils.globals import current_domain

    def _make(provider_id, **overrides):
        defaults = {
            "provider_id": provider_id,
            "album_id": "album-001",
            "product_type": "PHYSICAL",
            "price": 25.00,
            "stock_quantity": 10,
            "vinyl_size": "TWELVE_INCH",
            "vinyl_speed": "RPM_33",
        }
        if overrides.get("product_type") == "DIGITAL":
            defaults.pop("vinyl_size")
            defaults.pop("vinyl_speed")
            defaults.update({"file_format": "FLAC", "file_size_mb": 320.0})
        defaults.update(overrides)
        return current_domain.process(ListProduct(**defaults), asynchronous=False)

    return _make
