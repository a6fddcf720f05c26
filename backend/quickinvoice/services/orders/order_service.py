"""Order management service.

This service handles business logic for order management. Every method
that needs the current time takes it as ``now`` instead of reading a clock.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import structlog
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from quickinvoice.models.enums import OrderStatus
from quickinvoice.models.order import Order, OrderItem
from quickinvoice.money import ZERO, compute_totals, to_money
from quickinvoice.services.orders.exceptions import OrderNotFound
from quickinvoice.services.orders.inputs import OrderInput, validate_order_input
from quickinvoice.services.orders.sequencer import OrderNumberSequencer, SqlSequenceCounterStore
from quickinvoice.services.orders.transitions import TransitionPolicy, apply_status
from quickinvoice.utils.retry import RetryConfig

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderStats:
    """Dashboard counters for one seller."""

    total: int
    unpaid: int
    paid: int
    delivered: int
    revenue: Decimal  # Sum of totals of paid orders


class OrderService:
    """Service for order management operations."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        retry_config: RetryConfig | None = None,
        policy: TransitionPolicy | None = None,
    ):
        self.session = session
        self.sequencer = OrderNumberSequencer(SqlSequenceCounterStore(session), retry_config)
        self.policy = policy

    async def create_order(self, seller_id: str, data: OrderInput, *, now: datetime) -> Order:
        """Validate, number and persist a new order.

        The counter increment and the order insert commit in one transaction;
        if either fails, both roll back.

        Raises:
            InvalidOrder: Input breaks a business rule (nothing is sequenced).
            SequenceUnavailable: No order number could be allocated.
        """
        validate_order_input(data)

        items = [
            OrderItem(
                position=position,
                name=item.name.strip(),
                quantity=item.quantity,
                unit_price=to_money(item.unit_price),
            )
            for position, item in enumerate(data.items, start=1)
        ]
        delivery_fee = to_money(data.delivery_fee)
        subtotal, total = compute_totals(items, delivery_fee)

        try:
            order_number = await self.sequencer.next(seller_id)
            order = Order(
                seller_id=seller_id,
                order_number=order_number,
                customer_name=data.customer_name.strip(),
                customer_phone=data.customer_phone.strip(),
                items=items,
                subtotal=subtotal,
                delivery_fee=delivery_fee,
                total=total,
                status=OrderStatus.initial(),
                payment_method=data.payment_method,
                notes=data.notes,
                created_at=now,
                updated_at=now,
            )
            self.session.add(order)
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

        logger.info(
            "Created order",
            order_id=order.id,
            seller_id=seller_id,
            order_number=order.order_number,
            total=str(order.total),
        )
        return order

    async def list_orders(self, seller_id: str, *, skip: int = 0, limit: int = 50) -> tuple[list[Order], int]:
        """List a seller's orders, newest first. Returns (orders, total_count)."""
        orders_statement = (
            select(Order)
            .options(selectinload(Order.items))  # type: ignore[arg-type]
            .where(Order.seller_id == seller_id)
            .offset(skip)
            .limit(limit)
            .order_by(Order.created_at.desc(), Order.order_number.desc())  # type: ignore[attr-defined]
        )
        orders_result = await self.session.execute(orders_statement)
        orders = list(orders_result.scalars().all())

        count_statement = select(func.count()).select_from(Order).where(Order.seller_id == seller_id)
        count_result = await self.session.execute(count_statement)
        total = count_result.scalar() or 0

        return orders, total

    async def get_order(self, seller_id: str, order_id: str) -> Order:
        """Get one of the seller's orders with its items loaded."""
        statement = (
            select(Order)
            .options(selectinload(Order.items))  # type: ignore[arg-type]
            .where(Order.id == order_id, Order.seller_id == seller_id)
        )
        result = await self.session.execute(statement)
        order = result.scalars().first()
        if not order:
            raise OrderNotFound()
        return order

    async def update_status(self, seller_id: str, order_id: str, status: OrderStatus, *, now: datetime) -> Order:
        """Move an order to a new status.

        Raises:
            OrderNotFound: No such order for this seller.
            StatusTransitionNotAllowed: The transition policy forbids the move.
        """
        order = await self.get_order(seller_id, order_id)
        previous = order.status
        apply_status(order, status, now=now, policy=self.policy)
        await self.session.commit()

        logger.info("Updated order status", order_id=order.id, previous=previous.value, status=status.value)
        return order

    async def delete_order(self, seller_id: str, order_id: str) -> None:
        """Delete an order. Its number is never handed out again."""
        order = await self.get_order(seller_id, order_id)
        await self.session.delete(order)
        await self.session.commit()

        logger.info("Deleted order", order_id=order_id, order_number=order.order_number)

    async def get_stats(self, seller_id: str) -> OrderStats:
        """Count orders per status and sum revenue of paid orders."""
        counts_statement = (
            select(Order.status, func.count())
            .where(Order.seller_id == seller_id)
            .group_by(Order.status)  # type: ignore[arg-type]
        )
        counts_result = await self.session.execute(counts_statement)
        counts: dict[OrderStatus, int] = {status: count for status, count in counts_result.all()}

        # Summed in Python so the Decimal column type is honoured on every backend
        totals_statement = select(Order.total).where(Order.seller_id == seller_id, Order.status == OrderStatus.PAID)
        totals_result = await self.session.execute(totals_statement)
        revenue = sum(totals_result.scalars().all(), ZERO)

        return OrderStats(
            total=sum(counts.values()),
            unpaid=counts.get(OrderStatus.UNPAID, 0),
            paid=counts.get(OrderStatus.PAID, 0),
            delivered=counts.get(OrderStatus.DELIVERED, 0),
            revenue=to_money(revenue),
        )
