from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple, Union

from ..models import RequesterAttributes
from ..schemas.evaluation import EvaluationCode, EvaluationResult, PermissionRequest
from .matchers import evaluate_conditions, match_action, match_resource, match_subject
from .patterns import CompiledPolicy
from .policy_cache import PolicyCache

log = logging.getLogger("warden.evaluator")

BulkItem = Union[PermissionRequest, Tuple[str, str], Mapping]


def _pair(item: BulkItem) -> Tuple[str, str]:
    if isinstance(item, PermissionRequest):
        return item.resource, item.action
    if isinstance(item, Mapping):
        return item["resource"], item["action"]
    resource, action = item
    return resource, action


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class PolicyEvaluator:
    """
    First-match-wins ABAC evaluation.

    Policies come from the cache already ordered by priority. The first policy
    whose subject, resource and action match and whose conditions pass decides
    the outcome. A policy that matches structurally but fails its conditions is
    skipped, not treated as a denial. No match denies.
    """
    def __init__(self, cache: PolicyCache, *, now: Callable[[], datetime] = datetime.now):
        self.cache = cache
        self._now = now

    async def evaluate(self, user: Any, resource: str, action: str) -> bool:
        result = await self.evaluate_with_details(user, resource, action)
        return result.allowed

    async def evaluate_with_details(self, user: Any, resource: str, action: str) -> EvaluationResult:
        start = time.perf_counter()
        attrs = RequesterAttributes.from_any(user)

        if not attrs.is_active:
            return self._inactive(attrs, resource, action, start)

        policies = await self.cache.get_policies()
        return self._decide(attrs, resource, action, policies, start)

    async def evaluate_bulk(self, user: Any, requests: Iterable[BulkItem]) -> Dict[str, bool]:
        """
        Returns {"<resource>:<action>": allowed}. The policy list is fetched once
        for the whole batch.
        """
        attrs = RequesterAttributes.from_any(user)
        pairs = [_pair(r) for r in requests]
        results: Dict[str, bool] = {}

        if not attrs.is_active:
            for resource, action in pairs:
                results[f"{resource}:{action}"] = False
            return results

        policies = await self.cache.get_policies()
        for resource, action in pairs:
            start = time.perf_counter()
            results[f"{resource}:{action}"] = self._decide(attrs, resource, action, policies, start).allowed
        return results

    def invalidate_cache(self) -> None:
        self.cache.invalidate()

    def _inactive(self, attrs: RequesterAttributes, resource: str, action: str, start: float) -> EvaluationResult:
        log.debug(
            "evaluation rejected: inactive requester user_id=%s username=%s status=%s resource=%s action=%s dur_ms=%s",
            attrs.id,
            attrs.username,
            attrs.status,
            resource,
            action,
            _elapsed_ms(start),
        )
        return EvaluationResult(
            allowed=False,
            code=EvaluationCode.INACTIVE_REQUESTER,
            reason=f"User status is {attrs.status}, not active",
        )

    def _decide(
        self,
        attrs: RequesterAttributes,
        resource: str,
        action: str,
        policies: Sequence[CompiledPolicy],
        start: float,
    ) -> EvaluationResult:
        now = self._now()
        skipped: List[str] = []

        for cp in policies:
            if not (
                match_subject(cp.subject, attrs)
                and match_resource(cp.resource, resource)
                and match_action(cp.action, action)
            ):
                continue

            policy = cp.policy
            if policy.conditions is not None and not evaluate_conditions(policy.conditions, attrs, now):
                log.debug(
                    "policy matched but conditions not satisfied policy=%s policy_id=%s user_id=%s resource=%s action=%s",
                    policy.name,
                    policy.id,
                    attrs.id,
                    resource,
                    action,
                )
                skipped.append(policy.name)
                continue

            verb = "allows" if policy.allows else "denies"
            log.debug(
                "evaluation complete: policy matched policy=%s policy_id=%s user_id=%s resource=%s action=%s "
                "result=%s match=[%s] dur_ms=%s",
                policy.name,
                policy.id,
                attrs.id,
                resource,
                action,
                policy.effect.value,
                cp.describe(),
                _elapsed_ms(start),
            )
            return EvaluationResult(
                allowed=policy.allows,
                code=EvaluationCode.POLICY_MATCHED,
                matched_policy=policy,
                reason=f'Policy "{policy.name}" {verb} {action} on {resource} ({cp.describe()})',
                skipped_policies=skipped,
            )

        reason = f"No matching policy found for user {attrs.display_name} to {action} on {resource}"
        code = EvaluationCode.NO_MATCHING_POLICY
        if skipped:
            code = EvaluationCode.CONDITIONS_NOT_MET
            reason += f" (conditions not satisfied for: {', '.join(skipped)})"

        log.debug(
            "evaluation complete: no matching policy user_id=%s username=%s resource=%s action=%s result=deny dur_ms=%s",
            attrs.id,
            attrs.username,
            resource,
            action,
            _elapsed_ms(start),
        )
        return EvaluationResult(allowed=False, code=code, reason=reason, skipped_policies=skipped)
