"""Race-condition-safe order number allocation.

Each seller owns one counter. Allocation reads the counter, then writes
``last + 1`` conditionally on the counter still holding ``last``
(compare-and-swap). A lost race is retried with jitter; after the configured
number of attempts the caller gets ``SequenceUnavailable``.

Usage:
    sequencer = OrderNumberSequencer(SqlSequenceCounterStore(session))
    order_number = await sequencer.next(seller_id)  # "INV-0001"
    session.add(Order(order_number=order_number, ...))
    await session.commit()  # counter and order commit together
"""

from typing import Protocol

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickinvoice.config import settings
from quickinvoice.models.sequence_counter import SequenceCounter
from quickinvoice.services.orders.exceptions import SequenceUnavailable
from quickinvoice.utils.retry import RetryConfig, get_conflict_retrying

logger = structlog.get_logger(__name__)

ORDER_NUMBER_PREFIX = "INV-"
ORDER_NUMBER_MIN_DIGITS = 4


def format_order_number(value: int) -> str:
    """Format a counter value as an order number.

    Pads to at least four digits; larger values keep their natural width.

    >>> format_order_number(7)
    'INV-0007'
    >>> format_order_number(10234)
    'INV-10234'
    """
    if value < 1:
        raise ValueError(f"Order numbers start at 1, got {value}")
    return f"{ORDER_NUMBER_PREFIX}{value:0{ORDER_NUMBER_MIN_DIGITS}d}"


class CounterConflict(Exception):
    """Conditional counter write lost a race with another writer."""

    def __init__(self, seller_id: str, expected: int):
        self.seller_id = seller_id
        self.expected = expected
        super().__init__(f"Counter for seller {seller_id} moved past {expected}")


class SequenceCounterStore(Protocol):
    """Storage contract for per-seller counters."""

    async def read(self, seller_id: str) -> int:
        """Current counter value; 0 if the seller has no counter yet."""
        ...

    async def compare_and_set(self, seller_id: str, expected: int, new: int) -> bool:
        """Write ``new`` only if the counter still equals ``expected``."""
        ...


class SqlSequenceCounterStore:
    """Counter store backed by the ``sequence_counters`` table.

    Writes join the session's open transaction. The caller commits them
    together with the order, so a failed order insert rolls the increment
    back too.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def read(self, seller_id: str) -> int:
        stmt = select(SequenceCounter.last_number).where(
            SequenceCounter.seller_id == seller_id  # type: ignore[arg-type]
        )
        result = await self.session.execute(stmt)
        value: int | None = result.scalar_one_or_none()
        return value or 0

    async def compare_and_set(self, seller_id: str, expected: int, new: int) -> bool:
        stmt = (
            update(SequenceCounter)
            .where(SequenceCounter.seller_id == seller_id)  # type: ignore[arg-type]
            .where(SequenceCounter.last_number == expected)  # type: ignore[arg-type]
            .values(last_number=new)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 1:  # type: ignore[attr-defined]
            return True
        if expected != 0:
            return False
        return await self._create(seller_id, new)

    async def _create(self, seller_id: str, value: int) -> bool:
        """Insert the seller's first counter row inside a savepoint.

        A unique-key violation means a concurrent request created the row
        first; report it as a lost race so the caller re-reads.
        """
        try:
            async with self.session.begin_nested():
                self.session.add(SequenceCounter(seller_id=seller_id, last_number=value))
                await self.session.flush()
        except IntegrityError as e:
            logger.warning("Counter row created concurrently, retrying", seller_id=seller_id, error=str(e))
            return False
        return True


def default_retry_config() -> RetryConfig:
    return RetryConfig(
        max_attempts=settings.sequence_max_attempts,
        min_wait=settings.sequence_retry_min_wait,
        max_wait=settings.sequence_retry_max_wait,
    )


class OrderNumberSequencer:
    """Allocates per-seller order numbers with bounded optimistic retries."""

    def __init__(self, store: SequenceCounterStore, retry_config: RetryConfig | None = None):
        self.store = store
        self.retry_config = retry_config or default_retry_config()

    async def next(self, seller_id: str) -> str:
        """Allocate the next order number for a seller.

        Raises:
            SequenceUnavailable: Every attempt lost its compare-and-swap.
        """
        issued = 0
        try:
            async for attempt in get_conflict_retrying(CounterConflict, self.retry_config):
                with attempt:
                    issued = await self._increment(seller_id)
        except CounterConflict as e:
            logger.warning(
                "Order number allocation exhausted retries",
                seller_id=seller_id,
                attempts=self.retry_config.max_attempts,
            )
            raise SequenceUnavailable(seller_id, self.retry_config.max_attempts) from e

        order_number = format_order_number(issued)
        logger.debug("Allocated order number", seller_id=seller_id, order_number=order_number)
        return order_number

    async def _increment(self, seller_id: str) -> int:
        current = await self.store.read(seller_id)
        new = current + 1
        if not await self.store.compare_and_set(seller_id, current, new):
            raise CounterConflict(seller_id, current)
        return new
