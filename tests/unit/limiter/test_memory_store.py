import asyncio

import pytest

from bucket_limiter import InMemoryCounterStore, Limiter, Rule


@pytest.mark.asyncio
async def test_increment_creates_and_accumulates(store):
    assert await store.atomic_increment_with_expiry("b", 1, 10) == 1
    assert await store.atomic_increment_with_expiry("b", 3, 10) == 4
    assert await store.current_count("b") == 4


@pytest.mark.asyncio
async def test_missing_bucket_reads_zero(store):
    assert await store.current_count("nope") == 0
    assert await store.ttl("nope") == -2


@pytest.mark.asyncio
async def test_expiry_set_on_creation_only(store, clock):
    await store.atomic_increment_with_expiry("b", 1, 10)  # expires at 1013
    clock.return_value = 1008.0
    await store.atomic_increment_with_expiry("b", 1, 10)  # must not push expiry out
    assert await store.ttl("b") == 5

    clock.return_value = 1013.0
    assert await store.current_count("b") == 0
    assert await store.atomic_increment_with_expiry("b", 1, 10) == 1


@pytest.mark.asyncio
async def test_concurrent_increments_are_not_lost(store):
    results = await asyncio.gather(*(store.atomic_increment_with_expiry("b", 1, 60) for _ in range(50)))
    assert sorted(results) == list(range(1, 51))


@pytest.mark.asyncio
async def test_ping_and_close(store):
    await store.atomic_increment_with_expiry("b", 1, 10)
    assert await store.ping() is True
    await store.close()
    assert await store.current_count("b") == 0


@pytest.mark.asyncio
async def test_expired_slices_are_swept(clock):
    store = InMemoryCounterStore(clock=clock, sweep_every=10)
    limiter = Limiter(store, clock=clock)
    rule = Rule(window_seconds=1, limit=100)

    for second in range(2000, 3000):
        clock.return_value = float(second)
        await limiter.consume("k", [rule])

    assert len(store._data) <= 10
    assert set(store._exp) == set(store._data)
    assert await limiter.usage("k", [rule]) == [1]


def test_sweep_interval_must_be_positive():
    with pytest.raises(ValueError):
        InMemoryCounterStore(sweep_every=0)
