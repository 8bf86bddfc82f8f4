"""Test the TTL cache facade."""

import asyncio

import pytest

from brand_intelligence.core.cache import TTLCache, content_key


@pytest.mark.asyncio
async def test_get_or_set_hit_skips_compute(cache):
    """A cached value is returned without calling compute."""
    calls = []

    async def compute():
        calls.append(1)
        return "fresh"

    cache.set("k", "cached", ttl=60)
    assert await cache.get_or_set("k", compute, 60) == "cached"
    assert calls == []


@pytest.mark.asyncio
async def test_get_or_set_miss_computes_and_stores(cache):
    """A miss computes once and stores the result."""
    calls = []

    async def compute():
        calls.append(1)
        return {"score": 0.5}

    first = await cache.get_or_set("k", compute, 60)
    second = await cache.get_or_set("k", compute, 60)

    assert first == second == {"score": 0.5}
    assert len(calls) == 1
    assert "k" in cache


@pytest.mark.asyncio
async def test_failed_compute_does_not_poison_cache(cache):
    """A raising compute propagates and leaves nothing behind."""
    async def broken():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await cache.get_or_set("k", broken, 60)

    assert "k" not in cache
    assert len(cache) == 0

    async def working():
        return 42

    assert await cache.get_or_set("k", working, 60) == 42


@pytest.mark.asyncio
async def test_entries_expire_after_ttl(cache, clock):
    """Expired entries are recomputed."""
    values = iter([1, 2])

    async def compute():
        return next(values)

    assert await cache.get_or_set("k", compute, 10) == 1
    clock.advance(9)
    assert await cache.get_or_set("k", compute, 10) == 1
    clock.advance(1)
    assert await cache.get_or_set("k", compute, 10) == 2


@pytest.mark.asyncio
async def test_concurrent_misses_compute_once(cache):
    """Racing callers on one key share a single computation."""
    calls = []

    async def slow():
        calls.append(1)
        await asyncio.sleep(0.01)
        return "value"

    results = await asyncio.gather(*(cache.get_or_set("k", slow, 60) for _ in range(10)))

    assert results == ["value"] * 10
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_concurrent_misses_on_different_keys_do_not_block(cache):
    """Distinct keys compute independently."""
    async def compute_for(key):
        async def compute():
            await asyncio.sleep(0)
            return key
        return await cache.get_or_set(key, compute, 60)

    assert await asyncio.gather(compute_for("a"), compute_for("b")) == ["a", "b"]


def test_lru_bound_evicts_least_recently_used(clock):
    """With max_entries set, the least recently used entry goes first."""
    cache = TTLCache(max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1
    cache.set("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3


def test_cleanup_expired(cache, clock):
    cache.set("short", 1, ttl=5)
    cache.set("long", 2, ttl=50)
    clock.advance(10)

    assert cache.cleanup_expired() == 1
    assert len(cache) == 1
    assert cache.get("long") == 2


def test_content_key_is_deterministic():
    assert content_key("sentiment", "hello") == content_key("sentiment", "hello")
    assert content_key("sentiment", "hello") != content_key("authority", "hello")
    assert content_key("sentiment", "hello") == "sentiment:5d41402abc4b2a76b9719d911017c592"


@pytest.mark.asyncio
async def test_retry_after_failure_stays_single_flight(cache):
    """After a failed compute, the woken waiter and a new caller do not compute concurrently."""
    attempts = 0
    active = 0
    max_active = 0

    async def compute():
        nonlocal attempts, active, max_active
        attempts += 1
        active += 1
        max_active = max(max_active, active)
        try:
            await asyncio.sleep(0.01)
            if attempts == 1:
                raise RuntimeError("first attempt fails")
            return "value"
        finally:
            active -= 1

    first = asyncio.create_task(cache.get_or_set("k", compute, 60))
    second = asyncio.create_task(cache.get_or_set("k", compute, 60))
    await asyncio.sleep(0)

    with pytest.raises(RuntimeError):
        await first
    third = asyncio.create_task(cache.get_or_set("k", compute, 60))

    assert await second == "value"
    assert await third == "value"
    assert attempts == 2
    assert max_active == 1
    assert cache._locks == {}
