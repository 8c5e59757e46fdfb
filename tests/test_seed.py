import pytest

from warden.dal import InMemoryPolicyStore
from warden.seeds.seed_policies import ALL_POLICIES, seed_policies

pytestmark = pytest.mark.anyio


async def test_seed_is_idempotent():
    store = InMemoryPolicyStore()

    first = await seed_policies(store)
    second = await seed_policies(store)

    assert first == {"created": len(ALL_POLICIES), "updated": 0, "skipped": 0}
    assert second == {"created": 0, "updated": 0, "skipped": len(ALL_POLICIES)}
    assert [p.name for p in await store.list_policies()] == [
        "Super Admin - Full Access",
        "Default Allow - User Profile Read",
        "Default Deny - Delete Action",
    ]


async def test_force_updates_existing():
    store = InMemoryPolicyStore()
    await seed_policies(store)
    target = await store.get_by_name("Default Deny - Delete Action")
    await store.update(id=target.id, patch={"priority": 1})

    counts = await seed_policies(store, force=True)

    assert counts["updated"] == len(ALL_POLICIES)
    assert (await store.get(target.id)).priority == 5


async def test_dry_run_writes_nothing():
    store = InMemoryPolicyStore()

    counts = await seed_policies(store, dry_run=True)

    assert counts["created"] == len(ALL_POLICIES)
    assert await store.list_policies() == []
