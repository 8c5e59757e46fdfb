from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional, Tuple

from ..dal.interfaces import PolicyStore
from ..models import Policy
from .patterns import CompiledPolicy, compile_policy

log = logging.getLogger("warden.cache")

DEFAULT_TTL_SECONDS = 60.0


def order_policies(policies: Iterable[Policy]) -> List[Policy]:
    """
    Enabled policies, highest priority first. The sort is stable so the store's
    created_at ordering survives for equal priorities.
    """
    return sorted((p for p in policies if p.enabled), key=lambda p: -p.priority)


class PolicyCache:
    """
    Time-boxed copy of the enabled policy list.

    The cached tuple is never mutated, only replaced. invalidate() makes the
    next read go back to the store; a fetch that was already in flight when
    invalidate() ran is handed to its caller but not kept.
    """
    def __init__(
        self,
        store: PolicyStore,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._policies: Optional[Tuple[CompiledPolicy, ...]] = None
        self._expires_at = 0.0
        self._generation = 0
        self._lock = asyncio.Lock()

    def _fresh(self) -> Optional[Tuple[CompiledPolicy, ...]]:
        if self._policies is not None and self._clock() < self._expires_at:
            return self._policies
        return None

    async def get_policies(self) -> Tuple[CompiledPolicy, ...]:
        cached = self._fresh()
        if cached is not None:
            return cached

        async with self._lock:
            cached = self._fresh()
            if cached is not None:
                return cached

            generation = self._generation
            started = self._clock()
            fetched = await self.store.list_enabled_policies()
            compiled = tuple(compile_policy(p) for p in order_policies(fetched))

            if generation == self._generation:
                self._policies = compiled
                self._expires_at = started + self.ttl_seconds
            log.debug("policy cache refreshed policies=%d ttl_s=%s", len(compiled), self.ttl_seconds)
            return compiled

    def invalidate(self) -> None:
        self._policies = None
        self._expires_at = 0.0
        self._generation += 1
        log.debug("policy cache invalidated")
