from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, List, Sequence

from ..dal.interfaces import PermissionStore, PolicyStore, RoleStore
from ..models import Permission, Policy
from ..schemas.coverage import (
    AuditReport,
    CoverageReport,
    GapsReport,
    PermissionRef,
    RedundantPolicy,
    RoleCoverage,
)

log = logging.getLogger("warden.coverage")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def policy_covers_permission(policy: Policy, permission: Permission) -> bool:
    resource_covered = (
        policy.resource == "*"
        or policy.resource == permission.resource
        or policy.resource.startswith(f"{permission.resource}:")
        or policy.resource == f"{permission.resource}:*"
    )
    if not resource_covered:
        return False

    return (
        policy.action == "*"
        or policy.action == permission.action
        or permission.action in [a.strip() for a in policy.action.split(",")]
    )


def subject_targets_role(subject: str, role_name: str) -> bool:
    target = f"role:{role_name}"
    return subject == "*" or subject == target or target in subject


def coverage_percent(covered: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(covered / total * 100, 1)


def _ref(permission: Permission) -> PermissionRef:
    return PermissionRef(resource=permission.resource, action=permission.action, permission_name=permission.name)


class CoverageAnalyzer:
    """
    Compares the legacy RBAC permission catalogue with ABAC policies.

    A permission counts as covered when some *enabled* policy's resource and
    action patterns subsume it. Subjects are not considered for coverage.
    """
    def __init__(
        self,
        *,
        policy_store: PolicyStore,
        permission_store: PermissionStore,
        role_store: RoleStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.policy_store = policy_store
        self.permission_store = permission_store
        self.role_store = role_store
        self._clock = clock

    @staticmethod
    def _split(permissions: Sequence[Permission], enabled: Sequence[Policy]):
        covered: List[Permission] = []
        missing: List[Permission] = []
        for perm in permissions:
            if any(policy_covers_permission(p, perm) for p in enabled):
                covered.append(perm)
            else:
                missing.append(perm)
        return covered, missing

    async def get_coverage(self) -> CoverageReport:
        permissions = await self.permission_store.list_permissions()
        policies = await self.policy_store.list_policies()
        roles = await self.role_store.list_roles()
        enabled = [p for p in policies if p.enabled]

        covered, missing = self._split(permissions, enabled)

        role_coverage = [
            RoleCoverage(
                role=role.name,
                policies=sum(1 for p in enabled if subject_targets_role(p.subject, role.name)),
                permissions=len(role.permission_names),
            )
            for role in roles
        ]

        report = CoverageReport(
            rbac_count=len(permissions),
            abac_count=len(policies),
            enabled_abac_count=len(enabled),
            coverage_percent=coverage_percent(len(covered), len(permissions)),
            missing_policies=[_ref(p) for p in missing],
            role_coverage=role_coverage,
        )
        log.info(
            "coverage computed rbac=%d abac=%d enabled=%d percent=%s missing=%d",
            report.rbac_count,
            report.abac_count,
            report.enabled_abac_count,
            report.coverage_percent,
            len(report.missing_policies),
        )
        return report

    async def audit(self) -> AuditReport:
        """
        Full report. Redundant policies are those (enabled or not) covering no
        RBAC permission at all; the "*"/"*" catch-all is intentionally broad and
        never reported.
        """
        permissions = await self.permission_store.list_permissions()
        policies = await self.policy_store.list_policies()
        enabled = [p for p in policies if p.enabled]

        covered, missing = self._split(permissions, enabled)

        redundant = [
            RedundantPolicy(resource=p.resource, action=p.action, reason="No matching RBAC permission found")
            for p in policies
            if not (p.resource == "*" and p.action == "*")
            and not any(policy_covers_permission(p, perm) for perm in permissions)
        ]

        return AuditReport(
            rbac_count=len(permissions),
            abac_count=len(policies),
            enabled_abac_count=len(enabled),
            coverage_percent=coverage_percent(len(covered), len(permissions)),
            missing_policies=[_ref(p) for p in missing],
            covered_permissions=[_ref(p) for p in covered],
            redundant_policies=redundant,
            timestamp=self._clock(),
        )

    async def gaps(self) -> GapsReport:
        permissions = await self.permission_store.list_permissions()
        policies = await self.policy_store.list_enabled_policies()
        enabled = [p for p in policies if p.enabled]

        covered, missing = self._split(permissions, enabled)
        return GapsReport(
            missing_policies=[_ref(p) for p in missing],
            rbac_count=len(permissions),
            missing_count=len(missing),
            coverage_percent=coverage_percent(len(covered), len(permissions)),
            timestamp=self._clock(),
        )
