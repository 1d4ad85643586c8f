"""Pydantic request/response schemas for the marketplace API.

Field limits mirror the command definitions; business rules (positive
prices, non-negative stock, quantities of at least one) are left to the
domain so they surface as 400 responses.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Accounts ---


class RegisterBuyerRequest(BaseModel):
    name: str = Field(..., max_length=150)
    email: str = Field(..., max_length=254)


class RegisterProviderRequest(BaseModel):
    business_name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=254)


class SuspendProviderRequest(BaseModel):
    reason: str = Field(..., max_length=500)


class BuyerIdResponse(BaseModel):
    buyer_id: str


class ProviderIdResponse(BaseModel):
    provider_id: str


# --- Products ---


class ListProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "provider_id": "prov-001",
                    "album_id": "album-kind-of-blue",
                    "product_type": "PHYSICAL",
                    "price": 29.99,
                    "stock_quantity": 12,
                    "sku": "KOB-LP-12",
                    "vinyl_size": "TWELVE_INCH",
                    "vinyl_speed": "RPM_33",
                }
            ]
        }
    }

    provider_id: str
    album_id: str
    product_type: str = Field(..., max_length=20)
    price: float
    stock_quantity: int = 0
    sku: str | None = Field(None, max_length=50)
    low_stock_threshold: int | None = None
    vinyl_size: str | None = Field(None, max_length=20)
    vinyl_speed: str | None = Field(None, max_length=20)
    file_format: str | None = Field(None, max_length=20)
    file_size_mb: float | None = None


class UpdateProductRequest(BaseModel):
    provider_id: str | None = None
    actor_role: str = "Provider"
    product_type: str | None = Field(None, max_length=20)
    price: float | None = None
    stock_quantity: int | None = None
    sku: str | None = Field(None, max_length=50)
    low_stock_threshold: int | None = None
    vinyl_size: str | None = Field(None, max_length=20)
    vinyl_speed: str | None = Field(None, max_length=20)
    file_format: str | None = Field(None, max_length=20)
    file_size_mb: float | None = None


class ProviderActionRequest(BaseModel):
    provider_id: str | None = None
    actor_role: str = "Provider"


class ToggleFeaturedRequest(BaseModel):
    provider_id: str | None = None
    actor_role: str = "Provider"
    featured: bool | None = None


class SetStockRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"provider_id": "prov-001", "quantity": 7, "reason": "Stock count"}]}
    }

    provider_id: str
    quantity: int
    reason: str | None = Field(None, max_length=500)


class AdjustStockRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"provider_id": "prov-001", "change_type": "DECREMENT", "quantity": 3, "reason": "Damaged"}]
        }
    }

    provider_id: str
    change_type: str = Field(..., max_length=20)
    quantity: int
    reason: str | None = Field(None, max_length=500)


class BulkUpdateRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_ids": ["prod-001", "prod-002"],
                    "update_type": "PRICE_DECREASE_PERCENTAGE",
                    "value": 10,
                    "reason": "Summer sale",
                    "provider_id": "prov-001",
                }
            ]
        }
    }

    product_ids: list[str]
    update_type: str
    value: float | None = None
    boolean_value: bool | None = None
    reason: str | None = Field(None, max_length=500)
    provider_id: str | None = None
    actor_role: str = "Provider"


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    provider_id: str
    album_id: str
    sku: str | None = None
    product_type: str
    price: float
    stock_quantity: int
    low_stock_threshold: int
    stock_status: str
    is_active: bool
    featured: bool
    last_stock_update: datetime | None = None


class BulkUpdateResponse(BaseModel):
    updated_count: int
    products: list[ProductResponse]


class AvailabilityResponse(BaseModel):
    product_id: str
    album_id: str
    product_type: str
    stock_quantity: int
    stock_status: str
    is_active: bool
    has_alternative_format: bool
    alternative_product_ids: list[str] = []


class InventorySummaryResponse(BaseModel):
    provider_id: str
    total_products: int
    active_products: int
    total_units_in_stock: int
    products_with_stock: int
    products_out_of_stock: int
    low_stock_products: int
    inventory_value: float


# --- Orders ---


class OrderLineRequest(BaseModel):
    product_id: str
    quantity: int


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "buyer_id": "buyer-001",
                    "payment_method": "CARD",
                    "address": "12 Groove Street",
                    "city": "Portland",
                    "state": "OR",
                    "postal_code": "97201",
                    "country": "US",
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                }
            ]
        }
    }

    buyer_id: str
    payment_method: str = Field(..., max_length=50)
    address: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str = Field(..., max_length=100)
    items: list[OrderLineRequest]


class ItemDecisionRequest(BaseModel):
    provider_id: str


class RejectItemRequest(BaseModel):
    provider_id: str
    reason: str = Field(..., max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    status: str = Field(..., max_length=20)
    reason: str | None = Field(None, max_length=500)


class OrderIdResponse(BaseModel):
    order_id: str
    order_number: str


class OrderItemResponse(BaseModel):
    item_id: str
    product_id: str
    provider_id: str
    quantity: int
    unit_price: float
    subtotal: float
    status: str
    rejection_reason: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    buyer_id: str
    status: str
    fulfillment_status: str
    total: float
    payment_method: str | None = None
    rejection_reason: str | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    created_at: datetime | None = None
    items: list[OrderItemResponse]


class ItemStatusResponse(BaseModel):
    item_id: str
    status: str


class StatusResponse(BaseModel):
    status: str = "ok"
