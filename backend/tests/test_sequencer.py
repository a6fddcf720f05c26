import asyncio

import pytest

from quickinvoice.services.orders.exceptions import SequenceUnavailable
from quickinvoice.services.orders.sequencer import OrderNumberSequencer, format_order_number
from quickinvoice.utils.retry import RetryConfig

from tests.factories import AlwaysConflictingStore


class MemoryCounterStore:
    """Counter store that yields between read and write so tasks interleave."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.conflicts = 0

    async def read(self, seller_id: str) -> int:
        value = self.counters.get(seller_id, 0)
        await asyncio.sleep(0)
        return value

    async def compare_and_set(self, seller_id: str, expected: int, new: int) -> bool:
        await asyncio.sleep(0)
        if self.counters.get(seller_id, 0) != expected:
            self.conflicts += 1
            return False
        self.counters[seller_id] = new
        return True


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1, "INV-0001"), (42, "INV-0042"), (9999, "INV-9999"), (10000, "INV-10000")],
)
def test_format_order_number(value: int, expected: str) -> None:
    assert format_order_number(value) == expected


def test_format_order_number_rejects_zero() -> None:
    with pytest.raises(ValueError):
        format_order_number(0)


async def test_sequential_numbers_start_at_one() -> None:
    sequencer = OrderNumberSequencer(MemoryCounterStore(), RetryConfig(max_attempts=1, max_wait=0.0))

    numbers = [await sequencer.next("seller-a") for _ in range(3)]

    assert numbers == ["INV-0001", "INV-0002", "INV-0003"]


async def test_sellers_have_independent_sequences() -> None:
    sequencer = OrderNumberSequencer(MemoryCounterStore(), RetryConfig(max_attempts=1, max_wait=0.0))

    assert await sequencer.next("seller-a") == "INV-0001"
    assert await sequencer.next("seller-b") == "INV-0001"
    assert await sequencer.next("seller-a") == "INV-0002"


async def test_concurrent_allocations_are_unique_and_gapless() -> None:
    store = MemoryCounterStore()
    tasks = 10
    sequencer = OrderNumberSequencer(store, RetryConfig(max_attempts=tasks, min_wait=0.0, max_wait=0.0))

    numbers = await asyncio.gather(*(sequencer.next("seller-a") for _ in range(tasks)))

    assert sorted(numbers) == [format_order_number(n) for n in range(1, tasks + 1)]
    assert store.counters["seller-a"] == tasks
    # Interleaving really happened, otherwise this test proves nothing
    assert store.conflicts > 0


async def test_exhausted_retries_raise_sequence_unavailable() -> None:
    store = AlwaysConflictingStore()
    sequencer = OrderNumberSequencer(store, RetryConfig(max_attempts=3, min_wait=0.0, max_wait=0.0))

    with pytest.raises(SequenceUnavailable) as exc_info:
        await sequencer.next("seller-a")

    assert exc_info.value.attempts == 3
    assert store.attempts == 3
