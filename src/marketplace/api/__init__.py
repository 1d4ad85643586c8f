"""Marketplace API package."""

from marketplace.api.accounts import account_router
from marketplace.api.errors import register_error_handlers
from marketplace.api.orders import order_router
from marketplace.api.products import product_router

__all__ = ["account_router", "order_router", "product_router", "register_error_handlers"]
