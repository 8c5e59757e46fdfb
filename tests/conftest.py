from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from warden.dal import InMemoryPolicyStore
from warden.models import Policy, RequesterAttributes
from warden.services import PolicyCache, PolicyEvaluator


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingPolicyStore(InMemoryPolicyStore):
    """Records how often the evaluation path goes back to the store."""

    def __init__(self, policies=()):
        super().__init__(policies)
        self.fetches = 0

    async def list_enabled_policies(self):
        self.fetches += 1
        return await super().list_enabled_policies()


@pytest.fixture
def make_policy():
    seq = itertools.count(1)
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def _make(**kw) -> Policy:
        n = next(seq)
        data = {
            "id": f"p{n}",
            "name": f"policy-{n}",
            "subject": "*",
            "resource": "*",
            "action": "*",
            "effect": "allow",
            "priority": 0,
            "created_at": base + timedelta(seconds=n),
            "updated_at": base + timedelta(seconds=n),
        }
        data.update(kw)
        return Policy(**data)

    return _make


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return CountingPolicyStore()


@pytest.fixture
def cache(store, clock):
    return PolicyCache(store, ttl_seconds=60, clock=clock)


@pytest.fixture
def evaluator(cache):
    return PolicyEvaluator(cache, now=lambda: datetime(2026, 1, 1, 12, 0))


@pytest.fixture
def admin():
    return RequesterAttributes(id="u-1", username="alice", email="alice@example.com", roles={"admin"})


@pytest.fixture
def viewer():
    return RequesterAttributes(id="u-2", username="bob", email="bob@corp.test", roles={"viewer"}, departments={"sales"})
