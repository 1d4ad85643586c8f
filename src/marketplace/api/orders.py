"""FastAPI endpoints for placing orders and acting on order items."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    ItemDecisionRequest,
    ItemStatusResponse,
    OrderIdResponse,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    RejectItemRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
)
from marketplace.ordering.composer import PlaceOrder
from marketplace.ordering.fulfillment import AcceptOrderItem, RejectOrderItem
from marketplace.ordering.order import Order
from marketplace.ordering.shipping import UpdateOrderStatus
from marketplace.shared.commands import process

order_router = APIRouter(prefix="/orders", tags=["orders"])


def to_order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        buyer_id=str(order.buyer_id),
        status=order.status,
        fulfillment_status=order.fulfillment_status.value,
        total=order.total,
        payment_method=order.payment_method,
        rejection_reason=order.rejection_reason,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
        created_at=order.created_at,
        items=[
            OrderItemResponse(
                item_id=str(item.id),
                product_id=str(item.product_id),
                provider_id=str(item.provider_id),
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
                status=item.status,
                rejection_reason=item.rejection_reason,
            )
            for item in order.items
        ],
    )


def _orders():
    return current_domain.repository_for(Order)


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        buyer_id=body.buyer_id,
        items=json.dumps([line.model_dump() for line in body.items]),
        payment_method=body.payment_method,
        address=body.address,
        city=body.city,
        state=body.state,
        postal_code=body.postal_code,
        country=body.country,
    )
    order_id = process(command)
    order = _orders().get(order_id)
    return OrderIdResponse(order_id=order_id, order_number=order.order_number)


@order_router.get("/buyer/{buyer_id}", response_model=list[OrderResponse])
async def buyer_orders(buyer_id: str) -> list[OrderResponse]:
    return [to_order_response(o) for o in _orders().find_by_buyer(buyer_id)]


@order_router.get("/provider/{provider_id}", response_model=list[OrderResponse])
async def provider_orders(provider_id: str) -> list[OrderResponse]:
    return [to_order_response(o) for o in _orders().find_for_provider(provider_id)]


@order_router.get("/provider/{provider_id}/pending", response_model=list[OrderResponse])
async def provider_pending_orders(provider_id: str) -> list[OrderResponse]:
    return [to_order_response(o) for o in _orders().find_pending_for_provider(provider_id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return to_order_response(_orders().get(order_id))


@order_router.put("/{order_id}/items/{item_id}/accept", response_model=ItemStatusResponse)
async def accept_item(order_id: str, item_id: str, body: ItemDecisionRequest) -> ItemStatusResponse:
    command = AcceptOrderItem(order_id=order_id, item_id=item_id, provider_id=body.provider_id)
    status = process(command)
    return ItemStatusResponse(item_id=item_id, status=status)


@order_router.put("/{order_id}/items/{item_id}/reject", response_model=ItemStatusResponse)
async def reject_item(order_id: str, item_id: str, body: RejectItemRequest) -> ItemStatusResponse:
    command = RejectOrderItem(
        order_id=order_id,
        item_id=item_id,
        provider_id=body.provider_id,
        reason=body.reason,
    )
    status = process(command)
    return ItemStatusResponse(item_id=item_id, status=status)


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status, reason=body.reason)
    process(command)
    return StatusResponse()
