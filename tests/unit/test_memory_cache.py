"""Tests for the in-process TTL cache."""

from app.infrastructure.cache import InMemoryCache


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


async def test_set_get_round_trips_json_values() -> None:
    cache = InMemoryCache()
    await cache.set("k", {"roles": ["Agent"], "is_admin": False})
    assert await cache.get("k") == {"roles": ["Agent"], "is_admin": False}
    assert await cache.get("missing") is None


async def test_values_are_copies() -> None:
    cache = InMemoryCache()
    value = {"roles": ["Agent"]}
    await cache.set("k", value)
    value["roles"].append("Manager")
    assert await cache.get("k") == {"roles": ["Agent"]}


async def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = InMemoryCache(clock=clock)
    await cache.set("k", "v", ttl=10)
    clock.now += 9
    assert await cache.get("k") == "v"
    clock.now += 1
    assert await cache.get("k") is None


async def test_delete() -> None:
    cache = InMemoryCache()
    await cache.set("k", 1)
    assert await cache.delete("k") is True
    assert await cache.delete("k") is False
    assert await cache.get("k") is None


async def test_delete_pattern_matches_globs() -> None:
    cache = InMemoryCache()
    await cache.set("permission:t1:u1", 1)
    await cache.set("permission:t1:u2", 2)
    await cache.set("permission:t10:u1", 3)
    await cache.set("tenant:id:t1", 4)

    assert await cache.delete_pattern("permission:t1:*") == 2

    assert await cache.get("permission:t1:u1") is None
    assert await cache.get("permission:t10:u1") == 3
    assert await cache.get("tenant:id:t1") == 4


async def test_eviction_keeps_size_bounded() -> None:
    clock = _Clock()
    cache = InMemoryCache(max_entries=2, clock=clock)
    await cache.set("a", 1, ttl=5)
    await cache.set("b", 2, ttl=100)
    clock.now += 10
    await cache.set("c", 3)
    assert await cache.get("b") == 2
    assert await cache.get("c") == 3

    await cache.set("d", 4)
    assert await cache.get("b") is None
    assert await cache.get("d") == 4


async def test_disconnect_clears() -> None:
    cache = InMemoryCache()
    await cache.set("k", 1)
    await cache.disconnect()
    assert cache.is_available() is True
    assert await cache.get("k") is None
