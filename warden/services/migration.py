from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..dal.interfaces import PermissionStore, UserStore
from ..errors import UserNotFoundError
from ..schemas.coverage import Mismatch, VerificationReport
from .evaluator import PolicyEvaluator
from .rbac import RbacFallback, has_rbac_permission

log = logging.getLogger("warden.migration")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MigrationVerifier:
    """
    Replays every RBAC permission for every user through both models and
    reports where RBAC and ABAC disagree. An empty mismatch list means the
    deployment can switch to ABAC-only without changing any decision.
    """
    def __init__(
        self,
        *,
        evaluator: PolicyEvaluator,
        rbac: RbacFallback,
        user_store: UserStore,
        permission_store: PermissionStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.evaluator = evaluator
        self.rbac = rbac
        self.user_store = user_store
        self.permission_store = permission_store
        self._clock = clock

    async def verify(self, user_id: Optional[str] = None) -> VerificationReport:
        if user_id is not None:
            user = await self.user_store.get_user(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            users = [user]
        else:
            users = await self.user_store.list_users()

        permissions = await self.permission_store.list_permissions()
        pairs = [(p.resource, p.action) for p in permissions]

        mismatches: List[Mismatch] = []
        checked = 0
        for user in users:
            granted = await self.rbac.get_requester_permissions(user.id)
            abac = await self.evaluator.evaluate_bulk(user.to_attributes(), pairs)

            for perm in permissions:
                checked += 1
                rbac_result = has_rbac_permission(granted, perm.resource, perm.action)
                abac_result = abac[f"{perm.resource}:{perm.action}"]
                if rbac_result != abac_result:
                    mismatches.append(
                        Mismatch(
                            user_id=user.id,
                            username=user.username,
                            permission=perm.name,
                            resource=perm.resource,
                            action=perm.action,
                            rbac_result=rbac_result,
                            abac_result=abac_result,
                        )
                    )

        log.info(
            "migration verified users=%d checks=%d mismatches=%d",
            len(users),
            checked,
            len(mismatches),
        )
        return VerificationReport(
            total_users=len(users),
            total_permissions_checked=checked,
            matching=checked - len(mismatches),
            mismatching=len(mismatches),
            mismatches=mismatches,
            timestamp=self._clock(),
        )
