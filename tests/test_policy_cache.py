import pytest

from warden.services import PolicyCache

pytestmark = pytest.mark.anyio


async def test_serves_from_memory_within_ttl(cache, store, clock, make_policy):
    store._put(make_policy())

    await cache.get_policies()
    clock.advance(59)
    await cache.get_policies()

    assert store.fetches == 1


async def test_refetches_after_ttl(cache, store, clock):
    await cache.get_policies()
    clock.advance(60)
    await cache.get_policies()

    assert store.fetches == 2


async def test_invalidate_forces_refetch(cache, store, make_policy):
    await cache.get_policies()
    assert store.fetches == 1

    store._put(make_policy(name="late"))
    cache.invalidate()
    policies = await cache.get_policies()

    assert store.fetches == 2
    assert [cp.policy.name for cp in policies] == ["late"]


async def test_drops_disabled_and_orders_by_priority(store, clock, make_policy):
    low = make_policy(name="low", priority=1)
    off = make_policy(name="off", priority=500, enabled=False)
    high = make_policy(name="high", priority=100)

    class UnorderedStore:
        async def list_enabled_policies(self):
            return [low, off, high]

    cache = PolicyCache(UnorderedStore(), clock=clock)
    policies = await cache.get_policies()

    assert [cp.policy.name for cp in policies] == ["high", "low"]


async def test_equal_priority_keeps_store_order(cache, store, make_policy):
    first = make_policy(name="first", priority=10)
    second = make_policy(name="second", priority=10)
    store._put(second)
    store._put(first)

    policies = await cache.get_policies()

    assert [cp.policy.name for cp in policies] == ["first", "second"]


async def test_fetch_in_flight_during_invalidate_is_not_kept(clock, make_policy):
    cache = None

    class RacingStore:
        calls = 0

        async def list_enabled_policies(self):
            RacingStore.calls += 1
            if RacingStore.calls == 1:
                cache.invalidate()
            return [make_policy()]

    cache = PolicyCache(RacingStore(), clock=clock)
    await cache.get_policies()
    await cache.get_policies()

    assert RacingStore.calls == 2


async def test_cached_tuple_is_replaced_not_mutated(cache, store, make_policy):
    store._put(make_policy())
    before = await cache.get_policies()

    store._put(make_policy())
    cache.invalidate()
    after = await cache.get_policies()

    assert len(before) == 1
    assert len(after) == 2
