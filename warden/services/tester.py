from __future__ import annotations

import time

from ..dal.interfaces import UserStore
from ..errors import UserNotFoundError
from ..schemas.evaluation import MatchedPolicySummary, PermissionTestResult, TestedUser
from .evaluator import PolicyEvaluator


class PermissionTester:
    """Dry-run a single (user, resource, action) check for administrators."""

    def __init__(self, *, evaluator: PolicyEvaluator, user_store: UserStore):
        self.evaluator = evaluator
        self.user_store = user_store

    async def test_permission(self, user_id: str, resource: str, action: str) -> PermissionTestResult:
        start = time.perf_counter()

        user = await self.user_store.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        result = await self.evaluator.evaluate_with_details(user.to_attributes(), resource, action)

        matched = []
        if result.matched_policy is not None:
            p = result.matched_policy
            matched.append(
                MatchedPolicySummary(id=p.id, name=p.name, effect=p.effect.value, subject=p.subject, priority=p.priority)
            )

        return PermissionTestResult(
            allowed=result.allowed,
            user=TestedUser(id=user.id, username=user.username, roles=list(user.role_names)),
            resource=resource,
            action=action,
            matched_policies=matched,
            reason=result.reason,
            evaluation_time_ms=round((time.perf_counter() - start) * 1000, 3),
        )
