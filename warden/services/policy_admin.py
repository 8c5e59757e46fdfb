from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from ..dal.interfaces import PolicyRepository
from ..errors import PolicyNotFoundError
from ..models import Policy
from ..schemas.policy import PolicyCreate, PolicyUpdate
from .policy_cache import PolicyCache

log = logging.getLogger("warden.policy_admin")


class PolicyAdmin:
    """
    Policy write path. Every create/update/delete invalidates the evaluation
    cache before returning.
    """
    def __init__(self, *, repository: PolicyRepository, cache: PolicyCache):
        self.repository = repository
        self.cache = cache

    async def create(self, payload: Union[PolicyCreate, Dict[str, Any]]) -> Policy:
        body = payload if isinstance(payload, PolicyCreate) else PolicyCreate.model_validate(payload)
        policy = await self.repository.create(body.model_dump(mode="json"))
        self.cache.invalidate()
        log.info("policy created id=%s name=%s priority=%s", policy.id, policy.name, policy.priority)
        return policy

    async def get(self, policy_id: str) -> Policy:
        policy = await self.repository.get(policy_id)
        if policy is None:
            raise PolicyNotFoundError(policy_id)
        return policy

    async def list(self) -> List[Policy]:
        return list(await self.repository.list_policies())

    async def update(self, policy_id: str, payload: Union[PolicyUpdate, Dict[str, Any]]) -> Policy:
        body = payload if isinstance(payload, PolicyUpdate) else PolicyUpdate.model_validate(payload)
        policy = await self.repository.update(id=policy_id, patch=body.to_patch())
        if policy is None:
            raise PolicyNotFoundError(policy_id)
        self.cache.invalidate()
        log.info("policy updated id=%s name=%s", policy.id, policy.name)
        return policy

    async def delete(self, policy_id: str) -> None:
        ok = await self.repository.delete(id=policy_id)
        if not ok:
            raise PolicyNotFoundError(policy_id)
        self.cache.invalidate()
        log.info("policy deleted id=%s", policy_id)

    async def find_by_subject(self, subject: str) -> List[Policy]:
        """Enabled policies whose subject contains `subject`, highest priority first."""
        policies = await self.repository.list_enabled_policies()
        return [p for p in policies if subject in p.subject]

    async def has_policy_for_resource(self, resource: str, action: str) -> bool:
        policies = await self.repository.list_enabled_policies()
        return any(resource in p.resource and action in p.action for p in policies)
