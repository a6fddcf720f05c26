from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from quickinvoice.models import OrderStatus, Seller
from quickinvoice.models.sequence_counter import SequenceCounter
from quickinvoice.services.orders.exceptions import InvalidOrder, OrderNotFound, StatusTransitionNotAllowed
from quickinvoice.services.orders.inputs import LineItemInput, OrderInput
from quickinvoice.services.orders.order_service import OrderService
from quickinvoice.services.orders.transitions import TransitionPolicy
from quickinvoice.utils.retry import RetryConfig

from tests.factories import NOW


def order_input(**overrides: object) -> OrderInput:
    data: dict[str, object] = {
        "customer_name": "Akosua Mensah",
        "customer_phone": "024 412 3456",
        "items": [LineItemInput(name="Jollof rice", quantity=2, unit_price=Decimal("25.00"))],
        "delivery_fee": Decimal("10.00"),
    }
    data.update(overrides)
    return OrderInput.model_validate(data)


@pytest.fixture
def service(session: AsyncSession, no_wait_retry: RetryConfig) -> OrderService:
    return OrderService(session, retry_config=no_wait_retry, policy=TransitionPolicy.ANY)


async def test_first_order_is_numbered_and_totalled(service: OrderService, free_seller: Seller) -> None:
    order = await service.create_order(free_seller.id, order_input(), now=NOW)

    assert order.order_number == "INV-0001"
    assert order.status == OrderStatus.UNPAID
    assert order.subtotal == Decimal("50.00")
    assert order.delivery_fee == Decimal("10.00")
    assert order.total == Decimal("60.00")
    assert [(item.position, item.name) for item in order.items] == [(1, "Jollof rice")]


async def test_order_numbers_continue_per_seller(
    service: OrderService, free_seller: Seller, premium_seller: Seller
) -> None:
    first = await service.create_order(free_seller.id, order_input(), now=NOW)
    second = await service.create_order(free_seller.id, order_input(), now=NOW)
    other = await service.create_order(premium_seller.id, order_input(), now=NOW)

    assert (first.order_number, second.order_number) == ("INV-0001", "INV-0002")
    assert other.order_number == "INV-0001"


async def test_invalid_input_consumes_no_number(service: OrderService, free_seller: Seller) -> None:
    with pytest.raises(InvalidOrder) as exc_info:
        await service.create_order(
            free_seller.id,
            order_input(
                customer_name="  ",
                items=[LineItemInput(name="Rice", quantity=0, unit_price=Decimal("-1"))],
                delivery_fee=Decimal("-5"),
            ),
            now=NOW,
        )

    assert exc_info.value.errors == [
        "customer_name must not be empty",
        "delivery_fee must not be negative",
        "items[0].quantity must be positive",
        "items[0].unit_price must not be negative",
    ]
    order = await service.create_order(free_seller.id, order_input(), now=NOW)
    assert order.order_number == "INV-0001"


async def test_order_without_items_is_rejected(service: OrderService, free_seller: Seller) -> None:
    with pytest.raises(InvalidOrder, match="at least one item"):
        await service.create_order(free_seller.id, order_input(items=[]), now=NOW)


async def test_deleted_order_number_is_not_reused(
    service: OrderService, session: AsyncSession, free_seller: Seller
) -> None:
    first = await service.create_order(free_seller.id, order_input(), now=NOW)
    await service.delete_order(free_seller.id, first.id)

    second = await service.create_order(free_seller.id, order_input(), now=NOW)

    assert second.order_number == "INV-0002"
    counter = await session.get(SequenceCounter, free_seller.id)
    assert counter is not None and counter.last_number == 2


async def test_get_order_is_scoped_to_seller(
    service: OrderService, free_seller: Seller, premium_seller: Seller
) -> None:
    order = await service.create_order(free_seller.id, order_input(), now=NOW)

    assert (await service.get_order(free_seller.id, order.id)).id == order.id
    with pytest.raises(OrderNotFound):
        await service.get_order(premium_seller.id, order.id)


async def test_list_orders_newest_first(service: OrderService, free_seller: Seller) -> None:
    for minutes in range(3):
        await service.create_order(free_seller.id, order_input(), now=NOW + timedelta(minutes=minutes))

    orders, total = await service.list_orders(free_seller.id, skip=0, limit=2)

    assert total == 3
    assert [order.order_number for order in orders] == ["INV-0003", "INV-0002"]


async def test_update_status_bumps_updated_at(service: OrderService, free_seller: Seller) -> None:
    order = await service.create_order(free_seller.id, order_input(), now=NOW)
    later = NOW + timedelta(hours=1)

    updated = await service.update_status(free_seller.id, order.id, OrderStatus.PAID, now=later)

    assert updated.status == OrderStatus.PAID
    assert updated.updated_at == later


async def test_forward_only_policy_blocks_backward_moves(
    session: AsyncSession, no_wait_retry: RetryConfig, free_seller: Seller
) -> None:
    service = OrderService(session, retry_config=no_wait_retry, policy=TransitionPolicy.FORWARD_ONLY)
    order = await service.create_order(free_seller.id, order_input(), now=NOW)
    await service.update_status(free_seller.id, order.id, OrderStatus.DELIVERED, now=NOW)

    with pytest.raises(StatusTransitionNotAllowed):
        await service.update_status(free_seller.id, order.id, OrderStatus.UNPAID, now=NOW)


async def test_stats_count_statuses_and_paid_revenue(service: OrderService, free_seller: Seller) -> None:
    await service.create_order(free_seller.id, order_input(), now=NOW)
    paid = await service.create_order(free_seller.id, order_input(delivery_fee=Decimal("0")), now=NOW)
    delivered = await service.create_order(free_seller.id, order_input(), now=NOW)
    await service.update_status(free_seller.id, paid.id, OrderStatus.PAID, now=NOW)
    await service.update_status(free_seller.id, delivered.id, OrderStatus.DELIVERED, now=NOW)

    stats = await service.get_stats(free_seller.id)

    assert (stats.total, stats.unpaid, stats.paid, stats.delivered) == (3, 1, 1, 1)
    assert stats.revenue == Decimal("50.00")


async def test_rice_and_oil_totals(service: OrderService, free_seller: Seller) -> None:
    data = order_input(
        items=[
            LineItemInput(name="Rice", quantity=2, unit_price=Decimal("15.00")),
            LineItemInput(name="Oil", quantity=1, unit_price=Decimal("30.00")),
        ],
        delivery_fee=Decimal("5.00"),
    )

    order = await service.create_order(free_seller.id, data, now=NOW)

    assert (order.subtotal, order.total) == (Decimal("60.00"), Decimal("65.00"))
