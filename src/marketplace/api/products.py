"""FastAPI endpoints for product listings, stock and availability."""

from dataclasses import asdict

from fastapi import APIRouter
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AdjustStockRequest,
    AvailabilityResponse,
    BulkUpdateRequest,
    BulkUpdateResponse,
    InventorySummaryResponse,
    ListProductRequest,
    ProductIdResponse,
    ProductResponse,
    ProviderActionRequest,
    SetStockRequest,
    StatusResponse,
    ToggleFeaturedRequest,
    UpdateProductRequest,
)
from marketplace.catalogue import availability
from marketplace.catalogue.bulk import bulk_operator
from marketplace.catalogue.ledger import stock_ledger
from marketplace.catalogue.listing import (
    DeactivateProduct,
    ListProduct,
    ReactivateProduct,
    ToggleFeatured,
    UpdateProduct,
)
from marketplace.catalogue.product import Product
from marketplace.shared.commands import process

product_router = APIRouter(prefix="/products", tags=["products"])


def to_product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        provider_id=str(product.provider_id),
        album_id=str(product.album_id),
        sku=product.sku,
        product_type=product.product_type,
        price=product.price,
        stock_quantity=product.stock_quantity,
        low_stock_threshold=product.low_stock_threshold,
        stock_status=availability.product_stock_status(product).value,
        is_active=product.is_active,
        featured=product.featured,
        last_stock_update=product.last_stock_update,
    )


# --- Listing ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def list_product(body: ListProductRequest) -> ProductIdResponse:
    command = ListProduct(
        provider_id=body.provider_id,
        album_id=body.album_id,
        product_type=body.product_type,
        price=body.price,
        stock_quantity=body.stock_quantity,
        sku=body.sku,
        low_stock_threshold=body.low_stock_threshold,
        vinyl_size=body.vinyl_size,
        vinyl_speed=body.vinyl_speed,
        file_format=body.file_format,
        file_size_mb=body.file_size_mb,
    )
    product_id = process(command)
    return ProductIdResponse(product_id=product_id)


@product_router.post("/bulk", response_model=BulkUpdateResponse)
async def bulk_update(body: BulkUpdateRequest) -> BulkUpdateResponse:
    products = bulk_operator.apply(
        product_ids=body.product_ids,
        update_type=body.update_type,
        value=body.value,
        boolean_value=body.boolean_value,
        reason=body.reason,
        provider_id=body.provider_id,
        actor_role=body.actor_role,
    )
    return BulkUpdateResponse(
        updated_count=len(products),
        products=[to_product_response(p) for p in products],
    )


# --- Catalog queries (literal paths before /{product_id}) ---


@product_router.get("/low-stock", response_model=list[ProductResponse])
async def low_stock(threshold: int | None = None, provider_id: str | None = None) -> list[ProductResponse]:
    return [to_product_response(p) for p in availability.low_stock_products(threshold, provider_id)]


@product_router.get("/out-of-stock", response_model=list[ProductResponse])
async def out_of_stock(provider_id: str | None = None) -> list[ProductResponse]:
    return [to_product_response(p) for p in availability.out_of_stock_products(provider_id)]


@product_router.get("/albums/{album_id}/formats", response_model=list[ProductResponse])
async def album_formats(album_id: str) -> list[ProductResponse]:
    return [to_product_response(p) for p in availability.formats_for_album(album_id)]


@product_router.get("/providers/{provider_id}/inventory", response_model=InventorySummaryResponse)
async def provider_inventory(provider_id: str) -> InventorySummaryResponse:
    summary = availability.provider_inventory_summary(provider_id)
    return InventorySummaryResponse(**asdict(summary))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return to_product_response(current_domain.repository_for(Product).get(product_id))


@product_router.get("/{product_id}/availability", response_model=AvailabilityResponse)
async def product_availability(product_id: str) -> AvailabilityResponse:
    view = availability.availability_for(product_id)
    return AvailabilityResponse(
        product_id=view.product_id,
        album_id=view.album_id,
        product_type=view.product_type,
        stock_quantity=view.stock_quantity,
        stock_status=view.stock_status.value,
        is_active=view.is_active,
        has_alternative_format=view.has_alternative_format,
        alternative_product_ids=view.alternative_product_ids,
    )


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        provider_id=body.provider_id,
        actor_role=body.actor_role,
        product_type=body.product_type,
        price=body.price,
        stock_quantity=body.stock_quantity,
        sku=body.sku,
        low_stock_threshold=body.low_stock_threshold,
        vinyl_size=body.vinyl_size,
        vinyl_speed=body.vinyl_speed,
        file_format=body.file_format,
        file_size_mb=body.file_size_mb,
    )
    # Updates may rewrite stock, so they queue behind ledger operations
    stock_ledger.process_locked(command, product_id)
    return to_product_response(stock_ledger.get(product_id))


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def deactivate_product(product_id: str, provider_id: str | None = None, actor_role: str = "Provider"):
    command = DeactivateProduct(product_id=product_id, provider_id=provider_id, actor_role=actor_role)
    process(command)
    return StatusResponse()


@product_router.put("/{product_id}/reactivate", response_model=StatusResponse)
async def reactivate_product(product_id: str, body: ProviderActionRequest) -> StatusResponse:
    command = ReactivateProduct(product_id=product_id, provider_id=body.provider_id, actor_role=body.actor_role)
    process(command)
    return StatusResponse()


@product_router.put("/{product_id}/featured", response_model=ProductResponse)
async def toggle_featured(product_id: str, body: ToggleFeaturedRequest) -> ProductResponse:
    command = ToggleFeatured(
        product_id=product_id,
        provider_id=body.provider_id,
        actor_role=body.actor_role,
        featured=body.featured,
    )
    process(command)
    return to_product_response(current_domain.repository_for(Product).get(product_id))


# --- Stock ledger ---


@product_router.put("/{product_id}/stock", response_model=ProductResponse)
async def set_stock(product_id: str, body: SetStockRequest) -> ProductResponse:
    product = stock_ledger.set_stock(product_id, body.provider_id, body.quantity, reason=body.reason)
    return to_product_response(product)


@product_router.post("/{product_id}/stock/adjustments", response_model=ProductResponse)
async def adjust_stock(product_id: str, body: AdjustStockRequest) -> ProductResponse:
    product = stock_ledger.adjust_stock(
        product_id,
        body.provider_id,
        body.change_type,
        body.quantity,
        reason=body.reason,
    )
    return to_product_response(product)
