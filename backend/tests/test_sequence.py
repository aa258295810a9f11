import asyncio

import pytest
from sqlalchemy import select

from supplyhub.db.transaction import atomic
from supplyhub.models.counter import Counter
from supplyhub.models.utils.sequence import next_id
from supplyhub.utils.conflict_retry import ConflictRetryConfig, get_conflict_retrying

FAST_RETRY = ConflictRetryConfig(max_attempts=20, min_wait=0.01, max_wait=0.1, multiplier=0.01)


async def test_missing_counter_starts_at_one(session):
    async with atomic(session):
        assert await next_id(session, "request_headers") == 1

    stored = (await session.execute(select(Counter.current_id).where(Counter.name == "request_headers"))).scalar_one()
    assert stored == 1


async def test_sequential_calls_increase_strictly(session):
    values = []
    for _ in range(5):
        async with atomic(session):
            values.append(await next_id(session, "request_headers"))

    assert values == [1, 2, 3, 4, 5]


async def test_sequences_are_independent(session):
    async with atomic(session):
        assert await next_id(session, "request_headers") == 1
        assert await next_id(session, "roles") == 1
        assert await next_id(session, "request_headers") == 2


async def test_aborted_transaction_rolls_back_increment(session):
    async with atomic(session):
        await next_id(session, "request_headers")

    with pytest.raises(RuntimeError):
        async with atomic(session):
            await next_id(session, "request_headers")
            raise RuntimeError("entity creation failed")

    async with atomic(session):
        assert await next_id(session, "request_headers") == 2


async def test_concurrent_allocations_never_repeat(session_maker):
    async def allocate() -> int:
        async with session_maker() as session:
            async for attempt in get_conflict_retrying(FAST_RETRY):
                with attempt:
                    async with atomic(session):
                        return await next_id(session, "request_headers")
        raise AssertionError("unreachable")

    values = await asyncio.gather(*(allocate() for _ in range(6)))

    assert len(set(values)) == 6
    assert sorted(values) == list(range(1, 7))
