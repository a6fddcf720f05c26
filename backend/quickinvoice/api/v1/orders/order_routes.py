"""Order CRUD API endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Response, status

from quickinvoice.api.v1.dependencies import Now, OrderServiceDep, SellerServiceDep, UlidPath
from quickinvoice.api.v1.orders.schemas import (
    OrderDetailResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatsResponse,
    UpdateStatusRequest,
)
from quickinvoice.services.orders.exceptions import (
    InvalidOrder,
    OrderNotFound,
    SequenceUnavailable,
    StatusTransitionNotAllowed,
)
from quickinvoice.services.orders.inputs import OrderInput
from quickinvoice.services.sellers.exceptions import SellerNotFound

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["orders"])

# Seconds a client should wait before retrying after counter contention
SEQUENCE_RETRY_AFTER = "1"


@router.get("/sellers/{seller_id}/orders", response_model=OrderListResponse, operation_id="listOrders")
async def list_orders(
    seller_id: UlidPath,
    service: OrderServiceDep,
    skip: int = 0,
    limit: int = 50,
) -> OrderListResponse:
    """List the seller's orders, newest first, with pagination."""
    orders, total = await service.list_orders(seller_id, skip=skip, limit=limit)

    return OrderListResponse(
        orders=[OrderResponse.from_model(order) for order in orders],
        total=total,
    )


@router.post(
    "/sellers/{seller_id}/orders",
    response_model=OrderDetailResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createOrder",
)
async def create_order(
    seller_id: UlidPath,
    data: OrderInput,
    service: OrderServiceDep,
    sellers: SellerServiceDep,
    now: Now,
) -> OrderDetailResponse:
    """Create an order; the next order number is assigned automatically."""
    try:
        await sellers.get_seller(seller_id)
        order = await service.create_order(seller_id, data, now=now)
    except SellerNotFound:
        raise HTTPException(status_code=404, detail="Seller not found")
    except InvalidOrder as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except SequenceUnavailable:
        logger.warning("Order number allocation exhausted retries", seller_id=seller_id)
        raise HTTPException(
            status_code=503,
            detail="Order number temporarily unavailable, please retry",
            headers={"Retry-After": SEQUENCE_RETRY_AFTER},
        )
    return OrderDetailResponse.from_model(order)


@router.get("/sellers/{seller_id}/stats", response_model=OrderStatsResponse, operation_id="getOrderStats")
async def get_stats(seller_id: UlidPath, service: OrderServiceDep) -> OrderStatsResponse:
    """Order counts per status and revenue from paid orders."""
    stats = await service.get_stats(seller_id)
    return OrderStatsResponse.from_stats(stats)


@router.get(
    "/sellers/{seller_id}/orders/{order_id}",
    response_model=OrderDetailResponse,
    operation_id="getOrder",
)
async def get_order(seller_id: UlidPath, order_id: UlidPath, service: OrderServiceDep) -> OrderDetailResponse:
    """Get a single order with its items."""
    try:
        order = await service.get_order(seller_id, order_id)
        return OrderDetailResponse.from_model(order)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")


@router.patch(
    "/sellers/{seller_id}/orders/{order_id}/status",
    response_model=OrderDetailResponse,
    operation_id="updateOrderStatus",
)
async def update_status(
    seller_id: UlidPath,
    order_id: UlidPath,
    data: UpdateStatusRequest,
    service: OrderServiceDep,
    now: Now,
) -> OrderDetailResponse:
    """Change an order's status."""
    try:
        order = await service.update_status(seller_id, order_id, data.status, now=now)
        return OrderDetailResponse.from_model(order)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")
    except StatusTransitionNotAllowed as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete(
    "/sellers/{seller_id}/orders/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="deleteOrder",
)
async def delete_order(seller_id: UlidPath, order_id: UlidPath, service: OrderServiceDep) -> Response:
    """Delete an order. Its number is not reused."""
    try:
        await service.delete_order(seller_id, order_id)
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
