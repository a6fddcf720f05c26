"""API schemas for orders endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_serializer

from quickinvoice.models.enums import OrderStatus
from quickinvoice.models.order import Order, OrderItem
from quickinvoice.money import line_total as compute_line_total
from quickinvoice.services.orders.order_service import OrderStats
from quickinvoice.utils.datetime_utils import to_display_timezone

# =============================================================================
# Response Schemas
# =============================================================================


class OrderResponse(BaseModel):
    """Order response schema for list view."""

    id: str
    order_number: str
    customer_name: str
    customer_phone: str
    total: Decimal
    status: OrderStatus
    status_label: str
    item_count: int
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize datetime to display timezone."""
        localized_dt = to_display_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()

    @classmethod
    def from_model(cls, order: Order) -> "OrderResponse":
        """Create response from Order model."""
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            total=order.total,
            status=order.status,
            status_label=order.status.meta.display,
            item_count=len(order.items),
            created_at=order.created_at,
        )


class OrderItemResponse(BaseModel):
    """Order item response schema."""

    position: int
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @classmethod
    def from_model(cls, item: OrderItem) -> "OrderItemResponse":
        """Create response from OrderItem model."""
        return cls(
            position=item.position,
            name=item.name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=compute_line_total(item.quantity, item.unit_price),
        )


class OrderDetailResponse(BaseModel):
    """Detailed order response with items and money breakdown."""

    id: str
    order_number: str
    customer_name: str
    customer_phone: str
    items: list[OrderItemResponse]
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal
    status: OrderStatus
    status_label: str
    payment_method: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to display timezone."""
        localized_dt = to_display_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()

    @classmethod
    def from_model(cls, order: Order) -> "OrderDetailResponse":
        """Create response from Order model."""
        return cls(
            id=order.id,
            order_number=order.order_number,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            items=[OrderItemResponse.from_model(item) for item in order.items],
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            total=order.total,
            status=order.status,
            status_label=order.status.meta.display,
            payment_method=order.payment_method,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    """Order list response schema."""

    orders: list[OrderResponse]
    total: int


class OrderStatsResponse(BaseModel):
    """Dashboard counters for one seller."""

    total: int
    unpaid: int
    paid: int
    delivered: int
    revenue: Decimal

    @classmethod
    def from_stats(cls, stats: OrderStats) -> "OrderStatsResponse":
        return cls(
            total=stats.total,
            unpaid=stats.unpaid,
            paid=stats.paid,
            delivered=stats.delivered,
            revenue=stats.revenue,
        )


class ShareLinkResponse(BaseModel):
    """Customer message and a contact link that pre-fills it."""

    message: str
    contact_link: str


# =============================================================================
# Request Schemas
# =============================================================================


class UpdateStatusRequest(BaseModel):
    """Request body for a status change."""

    status: OrderStatus
