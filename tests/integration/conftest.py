"""Fixtures for HTTP tests against the marketplace routers."""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from marketplace.api import account_router, order_router, product_router, register_error_handlers


@pytest.fixture()
def client(_marketplace_domain):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context(request: Request, call_next):
        with _marketplace_domain.domain_context():
            return await call_next(request)

    app.include_router(account_router)
    app.include_router(product_router)
    app.include_router(order_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def provider(client):
    """Register and verify a provider over HTTP, returning its id."""
    counter = {"n": 0}

    def _make(verify=True):
        counter["n"] += 1
        response = client.post(
            "/accounts/providers",
            json={"business_name": f"Wax Trax {counter['n']}", "email": f"shop{counter['n']}@example.com"},
        )
        assert response.status_code == 201
        provider_id = response.json()["provider_id"]
        if verify:
            assert client.put(f"/accounts/providers/{provider_id}/verify").status_code == 200
        return provider_id

    return _make


@pytest.fixture()
def listed(client):
    """List a physical product over HTTP, returning its id."""

    def _make(provider_id, **overrides):
        body = {
            "provider_id": provider_id,
            "album_id": "album-kob",
            "product_type": "PHYSICAL",
            "price": 25.0,
            "stock_quantity": 10,
            "vinyl_size": "TWELVE_INCH",
            "vinyl_speed": "RPM_33",
        }
        body.update(overrides)
        response = client.post("/products", json=body)
        assert response.status_code == 201, response.text
        return response.json()["product_id"]

    return _make
